"""Run clustering — group word boxes into reading lines.

WHY: OCR gives word boxes with no line or column structure. The
renderer highlights one visual line at a time, so the words have to be
regrouped into lines that match the printed page, in reading order.

HOW: Words are split into a left and a right column at 55% of the image
width. Within each column, words sorted by vertical centre are assigned
greedily to the first line whose reference word (its first member) has a
vertical centre close enough; otherwise they open a new line. Each line
is sorted left to right, and all lines are ordered top to bottom by
their first word.

RULES:
- Column split: bbox.x < width * 0.55 is left, everything else right
- Line tolerance: max(10, reference height * 0.6) pixels
- Sort keys end with idx so exact ties do not depend on input order
- Empty lines never become runs
- Run ids are ``{segment_id}-run-{n}`` with n starting at 1
- Greedy matching against the first word of a line is a heuristic: on
  strongly skewed lines whose tolerance bands overlap, a word can land
  in a different line than a centroid-based method would pick
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from narration_sync.core.geometry import union_bbox
from narration_sync.core.ir import RunModel, WordModel

logger = logging.getLogger(__name__)

COLUMN_SPLIT_RATIO = 0.55
LINE_MIN_TOLERANCE_PX = 10
LINE_HEIGHT_RATIO = 0.6


def split_columns(words: Sequence[WordModel], image_width: float) -> tuple:
    """Split words into (left, right) columns by their left edge."""
    split_x = image_width * COLUMN_SPLIT_RATIO
    left = [word for word in words if word.bbox.x < split_x]
    right = [word for word in words if word.bbox.x >= split_x]
    return left, right


def _line_tolerance(reference: WordModel) -> float:
    return max(LINE_MIN_TOLERANCE_PX, reference.bbox.h * LINE_HEIGHT_RATIO)


def group_lines(words: Sequence[WordModel]) -> List[List[WordModel]]:
    """Group one column's words into horizontal lines.

    Returns:
        Lines in creation order, each sorted left to right.
    """
    ordered = sorted(words, key=lambda w: (w.bbox.center_y, w.bbox.x, w.idx))

    lines: List[List[WordModel]] = []
    for word in ordered:
        cy = word.bbox.center_y
        for line in lines:
            reference = line[0]
            if abs(cy - reference.bbox.center_y) <= _line_tolerance(reference):
                line.append(word)
                break
        else:
            lines.append([word])

    for line in lines:
        line.sort(key=lambda w: (w.bbox.x, w.idx))
    return lines


def cluster_lines(words: Sequence[WordModel], image_width: float) -> List[List[WordModel]]:
    """Cluster a segment's words into reading lines across both columns.

    Args:
        words: Every word of the segment.
        image_width: OCR-reported source image width in pixels.

    Returns:
        Non-empty lines ordered by (first word y, first word x).
    """
    left, right = split_columns(words, image_width)
    lines = [line for line in group_lines(left) + group_lines(right) if line]
    lines.sort(key=lambda line: (line[0].bbox.y, line[0].bbox.x, line[0].idx))

    logger.debug(
        "Clustered %d words into %d lines (%d left, %d right words)",
        len(words), len(lines), len(left), len(right),
    )
    return lines


def build_runs(segment_id: str, words: Sequence[WordModel], image_width: float) -> List[RunModel]:
    """Cluster words and materialize each line as a RunModel."""
    return [
        RunModel(
            id="{}-run-{}".format(segment_id, ordinal),
            bbox=union_bbox(line),
            words=line,
        )
        for ordinal, line in enumerate(cluster_lines(words, image_width), start=1)
    ]
