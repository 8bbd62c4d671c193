"""Playback progress across a run.

WHY: While narration plays, the renderer sweeps a highlight across the
current line. Jumping word to word looks choppy, and freezing during
the silence between two words looks like the player stalled. The sweep
position is therefore interpolated continuously: inside a word by the
word's elapsed time, and inside a pause from the previous word's right
edge across the upcoming word to its right edge. A word that follows a
pause stays fully lit while it is spoken, so the sweep never backs up.

HOW: compute_run_progress sorts the run's timed words by start time and
walks them, advancing a fill edge (``x_fill``) until it reaches the word
or pause that contains the query time. The result is the fill edge's
offset inside the run box, normalized to [0, 1].

RULES:
- Untimed words are ignored; a run with no timed words reports 0
- t <= first start -> 0; t >= last end -> 1
- The fill edge never moves left; progress is non-decreasing in t
- Words are visited in start-time order, not x order
- Every denominator is floored at 1 (no division by zero)
- All functions are pure and keep no state between calls
"""

from __future__ import annotations

import math
from typing import List, Optional, Tuple

from narration_sync.core.ir import RunModel, SegmentModel, WordModel


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def _timed_words(run: RunModel) -> List[WordModel]:
    return sorted((w for w in run.words if w.is_timed), key=lambda w: w.t0)


def compute_run_progress(run: RunModel, t_ms: float) -> float:
    """Return how far across ``run`` the highlight is at ``t_ms``.

    Args:
        run: A clustered run with (some) timed words.
        t_ms: Playback time in milliseconds, on the same clock as the
              word timings.

    Returns:
        Fraction of the run box width in [0, 1].
    """
    timed = _timed_words(run)
    if not timed:
        return 0.0
    if t_ms <= timed[0].t0:
        return 0.0
    if t_ms >= timed[-1].t1:
        return 1.0

    x_fill = run.bbox.x
    prev: Optional[WordModel] = None
    for cur in timed:
        if t_ms >= cur.t1:
            x_fill = max(x_fill, cur.bbox.right)
            prev = cur
            continue

        paused_before = prev is not None and cur.t0 > prev.t1

        if t_ms >= cur.t0:
            if paused_before:
                # The pause already swept across this word.
                x_fill = max(x_fill, cur.bbox.right)
            else:
                ratio = _clamp01((t_ms - cur.t0) / max(1, cur.t1 - cur.t0))
                x_fill = max(x_fill, cur.bbox.x + cur.bbox.w * ratio)
            break

        # Silent pause between prev and cur.
        if prev is not None:
            gap_start = prev.bbox.right
            ratio = _clamp01((t_ms - prev.t1) / max(1, cur.t0 - prev.t1))
            x_fill = max(x_fill, gap_start + (cur.bbox.right - gap_start) * ratio)
        break

    return _clamp01((x_fill - run.bbox.x) / max(1, run.bbox.w))


def run_time_range(run: RunModel) -> Optional[Tuple[float, float]]:
    """Return (earliest start, latest end) over the run's timed words."""
    timed = [w for w in run.words if w.is_timed]
    if not timed:
        return None
    return min(w.t0 for w in timed), max(w.t1 for w in timed)


def find_active_run(segment: SegmentModel, t_ms: float) -> Optional[RunModel]:
    """Return the run the highlight belongs to at ``t_ms``.

    The active run is the timed run with the latest start at or before
    ``t_ms``; ties go to the run that comes first in reading order. Before
    the first timed run starts there is no active run.
    """
    active: Optional[RunModel] = None
    active_start = -math.inf
    for run in segment.runs:
        span = run_time_range(run)
        if span is None:
            continue
        start = span[0]
        if active_start < start <= t_ms:
            active = run
            active_start = start
    return active


def sample_run_progress(run: RunModel, fps: int) -> List[Tuple[float, float]]:
    """Sample the run's progress at a fixed frame rate.

    Samples start at the run's first timed start and end exactly at its
    last timed end (always included). Untimed runs yield no samples.
    """
    if fps <= 0:
        raise ValueError("fps must be positive, got {}".format(fps))
    span = run_time_range(run)
    if span is None:
        return []

    t0, t1 = span
    step = 1000.0 / fps
    samples: List[Tuple[float, float]] = []
    frame = 0
    t = t0
    while t < t1:
        samples.append((t, compute_run_progress(run, t)))
        frame += 1
        t = t0 + frame * step
    samples.append((t1, compute_run_progress(run, t1)))
    return samples
