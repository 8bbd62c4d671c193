"""Bounding-box union and highlight padding.

WHY: A run's box is the smallest rectangle around its words, and the
renderer draws the highlight slightly larger than the text so ascenders
and descenders are not clipped.

HOW: Plain functions over BBox. Padding is proportional to the box
height and asymmetric vertically; descenders need more room than
ascenders.

RULES:
- union_bbox requires a non-empty word sequence
- Results never have width or height below 1
- Rounding is half-up (0.5 rounds toward +inf), not Python's banker's
  rounding, so padding matches the browser renderer pixel for pixel
"""

from __future__ import annotations

import math
from typing import Sequence

from narration_sync.core.ir import BBox, WordModel

_PAD_X_RATIO = 0.06
_PAD_TOP_RATIO = 0.10
_PAD_BOTTOM_RATIO = 0.18

_MIN_PAD_X = 1
_MIN_PAD_TOP = 1
_MIN_PAD_BOTTOM = 2


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward positive infinity."""
    return math.floor(value + 0.5)


def union_bbox(words: Sequence[WordModel]) -> BBox:
    """Return the minimal rectangle enclosing every word box.

    Raises:
        ValueError: If ``words`` is empty.
    """
    if not words:
        raise ValueError("union_bbox needs at least one word")

    x0 = min(word.bbox.x for word in words)
    y0 = min(word.bbox.y for word in words)
    x1 = max(word.bbox.right for word in words)
    y1 = max(word.bbox.bottom for word in words)
    return BBox(x=x0, y=y0, w=max(1, x1 - x0), h=max(1, y1 - y0))


def expand_box(box: BBox) -> BBox:
    """Pad a box for highlight rendering.

    Horizontal pad is 6% of the height on each side, the top grows by 10%
    of the height and the bottom by 18%, each with a small pixel minimum.
    """
    pad_x = max(_MIN_PAD_X, round_half_up(box.h * _PAD_X_RATIO))
    top = max(_MIN_PAD_TOP, round_half_up(box.h * _PAD_TOP_RATIO))
    bottom = max(_MIN_PAD_BOTTOM, round_half_up(box.h * _PAD_BOTTOM_RATIO))
    return BBox(
        x=box.x - pad_x,
        y=box.y - top,
        w=max(1, box.w + pad_x * 2),
        h=max(1, box.h + top + bottom),
    )
