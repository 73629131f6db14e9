from __future__ import annotations

from hatchet_web.logs.highlight import highlight_log, highlight_log_html


def _unmark(text: str) -> str:
    return text.replace("<mark>", "").replace("</mark>", "")


def test_trailing_duration_only() -> None:
    assert highlight_log("took 523ms") == "took <mark>523ms</mark>"


def test_duration_must_end_the_line() -> None:
    assert highlight_log("took 523ms to finish") == "took 523ms to finish"


def test_plan_summary_and_error_fields() -> None:
    line = 'Slow query {"planSummary":"COLLSCAN","errMsg":"boom"}'
    assert highlight_log(line) == (
        'Slow query {<mark>"planSummary":"COLLSCAN"</mark>,<mark>"errMsg":"boom"</mark>}'
    )
    assert highlight_log("planSummary: IXSCAN { a: 1 }") == "<mark>planSummary: IXSCAN</mark> { a: 1 }"


def test_metric_fields_wrap_name_and_value() -> None:
    line = '{"keysExamined":0,"docsExamined":1000,"nreturned":10,"reslen":2097152,"other":5}'
    assert highlight_log(line) == (
        '{<mark>"keysExamined":0</mark>,<mark>"docsExamined":1000</mark>,'
        '<mark>"nreturned":10</mark>,<mark>"reslen":2097152</mark>,"other":5}'
    )


def test_extra_terms_are_literal_and_case_insensitive() -> None:
    assert highlight_log("find Users in users.a+b", "USERS") == (
        "find <mark>Users</mark> in <mark>users</mark>.a+b"
    )
    assert highlight_log("a+b and ab", "a+b") == "<mark>a+b</mark> and ab"


def test_empty_terms_are_ignored() -> None:
    assert highlight_log("nothing to see", "") == "nothing to see"


def test_markers_only_add_text() -> None:
    line = 'Slow query {"ns":"test.users","planSummary":"IXSCAN","nMatched":1,"nModified":1} 150ms'
    marked = highlight_log(line, "test")
    assert _unmark(marked) == line
    assert marked.count("<mark>") == 5


def test_later_passes_may_rewrap() -> None:
    once = highlight_log("took 523ms")
    twice = highlight_log(once)
    assert twice == once
    rewrapped = highlight_log("took 523ms", "523")
    assert rewrapped == "took <mark><mark>523</mark>ms</mark>"
    assert _unmark(rewrapped) == "took 523ms"


def test_html_variant_escapes_message() -> None:
    html = highlight_log_html('<script>alert("x")</script> 12ms', "alert")
    assert str(html) == (
        "&lt;script&gt;<mark>alert</mark>(&#34;x&#34;)&lt;/script&gt; <mark>12ms</mark>"
    )
