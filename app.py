"""Flask application entrypoint for the hatchet dashboard."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from flask import Flask, redirect, url_for

from hatchet_web.config import settings
from hatchet_web.utils.logging_utils import set_verbose
from hatchet_web.web import hatchet_blueprint


def create_app(config: Optional[Mapping[str, Any]] = None) -> Flask:
    app = Flask(__name__)
    app.config.setdefault("HATCHET_DATA_ROOT", str(settings.data_root))
    app.config.setdefault("HATCHET_VERBOSE", settings.verbose)
    app.config.setdefault("HATCHET_LOG_PAGE_SIZE", settings.log_page_size)
    app.config.setdefault("HATCHET_TOP_N", settings.top_n)
    if config:
        app.config.update(config)

    set_verbose(bool(app.config["HATCHET_VERBOSE"]))
    app.register_blueprint(hatchet_blueprint)

    @app.route("/")
    def index():
        return redirect(url_for("hatchet.hatchets"))

    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=settings.verbose)
