import pytest

from routecheck.paths.template import (
    DynamicSegment,
    LiteralSegment,
    TemplateError,
    normalize_template,
)


def test_normalize_template_literals_and_captures():
    t = normalize_template("/a/{b}/c/{d}")
    assert t.segments == (
        LiteralSegment("a"),
        DynamicSegment("b"),
        LiteralSegment("c"),
        DynamicSegment("d"),
    )
    assert t.dynamic_names() == ["b", "d"]
    assert t.render() == "/a/{b}/c/{d}"


def test_normalize_template_optional_leading_and_trailing_slash():
    assert normalize_template("items/{id}").render() == "/items/{id}"
    assert normalize_template("/items/{id}/").render() == "/items/{id}"


def test_normalize_template_root():
    t = normalize_template("/")
    assert len(t) == 0
    assert t.render() == "/"


@pytest.mark.parametrize(
    "raw",
    [
        "/a//b",          # empty segment
        "//",
        "",
        "/a/b//",
        "/{a/b/c",        # unclosed capture
        "/a/b}/c",        # unclosed capture
        "/a/{}/c",        # empty name
        "/a/x{b}y",       # stray bracket
        "/a/{b-s}",       # not an identifier
        "/a/{11b}",
        "/files/{*rest}",  # catch-all not supported
        "/a b",           # bad path char
    ],
)
def test_normalize_template_rejects_malformed(raw):
    with pytest.raises(TemplateError) as exc:
        normalize_template(raw)
    assert exc.value.raw == raw


def test_normalize_template_rejects_repeated_capture_name():
    with pytest.raises(TemplateError) as exc:
        normalize_template("/a/{id}/b/{id}")
    assert "repeats" in exc.value.reason


def test_normalize_template_accepts_percent_escapes_and_sub_delims():
    t = normalize_template("/caf%C3%A9/v1.0/a:b@c")
    assert [s.text for s in t.segments] == ["caf%C3%A9", "v1.0", "a:b@c"]
