"""Pre-sampled progress track for renderers without the calculator.

WHY: Some playback surfaces (video compositors, simple web players) can
only interpolate keyframes. Sampling compute_run_progress at a fixed
frame rate gives them the same sweep the live calculator would produce.

HOW: For each timed run, sample_run_progress produces ``[t_ms, fraction]``
pairs from the run's first start to its last end. Untimed runs are
listed with an empty sample list so run ids stay complete.

RULES:
- Sample rate defaults to config.DEFAULT_TRACK_FPS
- Times and fractions are rounded to 3 decimals
- Output suffix: "-progress.json"
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from narration_sync.config import DEFAULT_TRACK_FPS
from narration_sync.core.ir import PageModel
from narration_sync.core.progress import sample_run_progress
from narration_sync.formatters.base import BaseFormatter, FormatterOutput


class ProgressTrackFormatter(BaseFormatter):
    """Formatter that samples every run's highlight progress."""

    def __init__(self, fps: Optional[int] = None) -> None:
        self.fps = fps if fps is not None else DEFAULT_TRACK_FPS

    @property
    def name(self) -> str:
        return "Progress Track"

    def format(self, page: PageModel) -> List[FormatterOutput]:
        segments: List[Dict[str, Any]] = []
        for segment in page.segments:
            runs = [
                {
                    "id": run.id,
                    "samples": [
                        [round(t, 3), round(p, 3)]
                        for t, p in sample_run_progress(run, self.fps)
                    ],
                }
                for run in segment.runs
            ]
            segments.append({"id": segment.id, "runs": runs})

        output = {"fps": self.fps, "segments": segments}
        return [
            FormatterOutput(
                suffix="-progress.json",
                content=json.dumps(output, indent=2),
                media_type="application/json",
            )
        ]
