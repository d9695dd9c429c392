from __future__ import annotations

from routecheck.paths.template import LiteralSegment, Segment, UrlTemplate


def segment_overlap(a: Segment, b: Segment) -> bool:
    # a dynamic position can always take the other side's exact value
    if isinstance(a, LiteralSegment) and isinstance(b, LiteralSegment):
        return a.text == b.text
    return True


def templates_overlap(a: UrlTemplate, b: UrlTemplate) -> bool:
    """
    True if at least one concrete path is matched by both templates.

    No variadic segments exist, so templates of different length never overlap.
    """
    if len(a) != len(b):
        return False
    return all(segment_overlap(x, y) for x, y in zip(a.segments, b.segments))
