"""Narration Sync — align scanned page words with recorded narration.

WHY: A scanned book page and its narration audio come from two separate
machine passes: OCR gives unordered word boxes, TTS gives token timestamps
keyed by word index. A read-along renderer needs reading lines ("runs")
it can highlight, and a way to know how far across a run the highlight
should be at any playback moment.

HOW: Three-stage pipeline: fetch (async asset client), assemble (word
builder, timing attacher, run clustering), consume (progress calculator
and pluggable exporters). Each stage is independently testable.

RULES:
- Every consumer works from the same PageModel IR
- The progress calculator is pure and keeps no state between calls
- OCR and speech synthesis are never performed here, only consumed
"""

__version__ = "0.1.0"
