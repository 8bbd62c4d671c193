"""Plain text run listing for review.

WHY: When a highlight looks wrong on screen, the first question is
whether the runs themselves are wrong. A readable listing of every run
with its time range answers that without opening a renderer.

HOW: One block per segment: a header line with the segment id and time
range, then one line per run with its time range and its words joined
by spaces. Blocks are separated by a blank line.

RULES:
- Header: "{segment id} [{t0} - {t1}]"
- Run line: "  [{t0} - {t1}] {text}", "--:--.---" for untimed runs
- Times formatted as mm:ss.mmm
- No trailing whitespace on any line
- Output suffix: "-runs.txt"
"""

from __future__ import annotations

from typing import List

from narration_sync.core.ir import PageModel, RunModel
from narration_sync.core.progress import run_time_range
from narration_sync.formatters.base import BaseFormatter, FormatterOutput, format_ms

_UNTIMED = "--:--.---"


def _run_line(run: RunModel) -> str:
    span = run_time_range(run)
    if span is None:
        stamp = "[{} - {}]".format(_UNTIMED, _UNTIMED)
    else:
        stamp = "[{} - {}]".format(format_ms(span[0]), format_ms(span[1]))
    return "  {} {}".format(stamp, run.text).rstrip()


class PlainTextFormatter(BaseFormatter):
    """Formatter that lists runs per segment as plain text."""

    @property
    def name(self) -> str:
        return "Plain Text"

    def format(self, page: PageModel) -> List[FormatterOutput]:
        blocks: List[str] = []
        for segment in page.segments:
            lines = ["{} [{} - {}]".format(
                segment.id, format_ms(segment.t0), format_ms(segment.t1),
            )]
            lines.extend(_run_line(run) for run in segment.runs)
            blocks.append("\n".join(lines))

        content = "\n\n".join(blocks)
        if content:
            content += "\n"

        return [
            FormatterOutput(
                suffix="-runs.txt",
                content=content,
                media_type="text/plain",
            )
        ]
