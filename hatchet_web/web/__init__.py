"""Flask blueprint serving chart pages and log tables."""

from .routes import bp as hatchet_blueprint

__all__ = ["hatchet_blueprint"]
