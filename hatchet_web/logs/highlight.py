"""Mark operationally interesting substrings of a log message."""

from __future__ import annotations

import re
from typing import Iterable, List, Tuple

from markupsafe import Markup, escape

MARK_OPEN = "<mark>"
MARK_CLOSE = "</mark>"

METRIC_FIELDS = (
    "keysExamined",
    "keysInserted",
    "docsExamined",
    "nreturned",
    "nMatched",
    "nModified",
    "ndeleted",
    "ninserted",
    "reslen",
)

# Applied in order; each rule sees the output of the previous one, so a later
# rule may wrap text that an earlier rule already marked.
HIGHLIGHT_RULES: Tuple[re.Pattern[str], ...] = (
    re.compile(r'"?(?:planSummary|errMsg)"?:\s?"?\w+"?'),
    re.compile(r"\d+ms$"),
    re.compile(r'"?(?:' + "|".join(METRIC_FIELDS) + r')"?:\d+'),
)

# Private-use code points stand in for the markers while the line is escaped.
_HTML_OPEN = "\ue000"
_HTML_CLOSE = "\ue001"


def _term_patterns(terms: Iterable[str]) -> List[re.Pattern[str]]:
    return [re.compile(re.escape(term), re.IGNORECASE) for term in terms if term]


def highlight_log(
    line: str,
    *terms: str,
    open_mark: str = MARK_OPEN,
    close_mark: str = MARK_CLOSE,
) -> str:
    """Wrap plan/error fields, durations, metrics and *terms* in markers.

    Only marker text is inserted; every other character of *line* is kept.
    Search terms match literally and case-insensitively; empty terms are
    skipped.
    """

    def wrap(match: re.Match[str]) -> str:
        return open_mark + match.group(0) + close_mark

    for pattern in (*HIGHLIGHT_RULES, *_term_patterns(terms)):
        line = pattern.sub(wrap, line)
    return line


def highlight_log_html(line: str, *terms: str) -> Markup:
    """HTML-escaped :func:`highlight_log` with ``<mark>`` elements."""

    marked = highlight_log(line, *terms, open_mark=_HTML_OPEN, close_mark=_HTML_CLOSE)
    escaped = str(escape(marked))
    return Markup(escaped.replace(_HTML_OPEN, MARK_OPEN).replace(_HTML_CLOSE, MARK_CLOSE))
