from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union


_IDENT = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
# unreserved + sub-delims + ":" / "@", plus percent escapes
_LITERAL = re.compile(r"^(?:[A-Za-z0-9\-._~!$&'()*+,;=:@]|%[0-9A-Fa-f]{2})+$")


class TemplateError(ValueError):
    def __init__(self, raw: str, reason: str) -> None:
        super().__init__(f"invalid path template {raw!r}: {reason}")
        self.raw = raw
        self.reason = reason


@dataclass(frozen=True)
class LiteralSegment:
    text: str

    def render(self) -> str:
        return self.text


@dataclass(frozen=True)
class DynamicSegment:
    name: str

    def render(self) -> str:
        return "{" + self.name + "}"


Segment = Union[LiteralSegment, DynamicSegment]


@dataclass(frozen=True)
class UrlTemplate:
    raw: str
    segments: tuple[Segment, ...]

    def __len__(self) -> int:
        return len(self.segments)

    def dynamic_names(self) -> list[str]:
        return [s.name for s in self.segments if isinstance(s, DynamicSegment)]

    def render(self) -> str:
        # canonical form: /a/{b}; root is "/"
        return "/" + "/".join(s.render() for s in self.segments)


def _parse_segment(raw: str, seg: str) -> Segment:
    opens = seg.startswith("{")
    closes = seg.endswith("}")
    if opens != closes:
        raise TemplateError(raw, f"unclosed capture in segment {seg!r}")

    if opens:
        name = seg[1:-1]
        if not name:
            raise TemplateError(raw, "empty capture name")
        if name.startswith("*"):
            raise TemplateError(raw, f"catch-all segment {seg!r} is not supported")
        if not _IDENT.match(name):
            raise TemplateError(raw, f"capture name {name!r} is not a valid identifier")
        return DynamicSegment(name)

    if "{" in seg or "}" in seg:
        raise TemplateError(raw, f"stray bracket in segment {seg!r}")
    if not _LITERAL.match(seg):
        raise TemplateError(raw, f"segment {seg!r} contains characters not allowed in a URL path")
    return LiteralSegment(seg)


def normalize_template(raw: str) -> UrlTemplate:
    """
    Parse a raw URL template into its canonical segment sequence.

    One leading and one trailing slash are optional; "/" is the root template.
    Every other empty segment is an error, as are malformed captures,
    catch-all captures and repeated capture names.
    """
    text = (raw or "").strip()
    if text == "/":
        return UrlTemplate(raw=raw, segments=())
    if text.startswith("/"):
        text = text[1:]
    if text.endswith("/"):
        text = text[:-1]
    if not text:
        raise TemplateError(raw, "empty segment")

    segments: list[Segment] = []
    names: set[str] = set()
    for seg in text.split("/"):
        if not seg:
            raise TemplateError(raw, "empty segment")
        parsed = _parse_segment(raw, seg)
        if isinstance(parsed, DynamicSegment):
            if parsed.name in names:
                raise TemplateError(raw, f"capture name {parsed.name!r} repeats")
            names.add(parsed.name)
        segments.append(parsed)

    return UrlTemplate(raw=raw, segments=tuple(segments))
