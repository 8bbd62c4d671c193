"""Intermediate representation dataclasses for synchronized pages.

WHY: OCR returns a flat list of word boxes and TTS returns a flat list of
timed tokens. The renderer, the exporters, and the progress calculator
all need the same structure: words with optional timing, grouped into
reading lines (runs), grouped into segments that pair an image region
with one narration clip. The IR is that shared structure.

HOW: Dataclasses form a hierarchy:
  BBox          — axis-aligned rectangle in image pixel space
  WordTiming    — narration start/end of one word (milliseconds)
  WordModel     — one recognized word with optional timing
  RunModel      — one clustered reading line
  SegmentModel  — one image region + audio clip, holding its runs
  SegmentAsset  — input descriptor for one segment (URLs + text)
  PageModel     — the result of loading a batch of segments

RULES:
- Box width and height are never below 1 once clamped
- Timing is explicit: ``WordModel.timing`` is a WordTiming or None
- A word belongs to exactly one run; the segment's flat word list and
  the run share the same WordModel objects
- All times are integer or float milliseconds (no unit conversion)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class BBox:
    """Axis-aligned rectangle ``{x, y, w, h}`` in image pixels."""

    x: float
    y: float
    w: float
    h: float

    @classmethod
    def clamped(cls, x: float, y: float, w: float, h: float) -> BBox:
        """Build a box with width and height floored at 1.

        Degenerate OCR boxes (zero or negative size) would otherwise break
        union and progress math downstream.
        """
        return cls(x=x, y=y, w=max(1, w), h=max(1, h))

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    @property
    def center_y(self) -> float:
        return self.y + self.h / 2

    def contains(self, other: BBox) -> bool:
        """True when ``other`` lies entirely inside this box."""
        return (
            self.x <= other.x
            and self.y <= other.y
            and other.right <= self.right
            and other.bottom <= self.bottom
        )

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "w": self.w, "h": self.h}


@dataclass
class WordTiming:
    """Narration envelope of one word, in milliseconds.

    RULES:
    - t0 is the earliest start of every token that referenced the word
    - t1 is the latest end of every token that referenced the word
    """

    t0: float
    t1: float

    def merged(self, t0: float, t1: float) -> WordTiming:
        """Return the envelope widened to also cover ``[t0, t1]``."""
        return WordTiming(t0=min(self.t0, t0), t1=max(self.t1, t1))


@dataclass
class WordModel:
    """A single recognized word from the OCR pass.

    WHY: The word is the unit both passes agree on: OCR gives it a box,
    TTS references it by reading index.

    RULES:
    - id: ``word-{idx}``, unique within a segment
    - idx: zero-based position in the OCR word list (TTS lookup key)
    - timing: None until a TTS token references this word's idx
    """

    id: str
    idx: int
    text: str
    bbox: BBox
    timing: Optional[WordTiming] = None

    @property
    def is_timed(self) -> bool:
        return self.timing is not None

    @property
    def t0(self) -> Optional[float]:
        return self.timing.t0 if self.timing is not None else None

    @property
    def t1(self) -> Optional[float]:
        return self.timing.t1 if self.timing is not None else None


@dataclass
class RunModel:
    """One clustered reading line, highlighted as a unit.

    RULES:
    - id: ``{segment_id}-run-{ordinal}``, ordinal is 1-based
    - bbox: union of every member word box
    - words: sorted left to right
    - Read-only after the clustering engine creates it
    """

    id: str
    bbox: BBox
    words: List[WordModel] = field(default_factory=list)

    @property
    def text(self) -> str:
        return " ".join(word.text for word in self.words)


@dataclass
class SegmentModel:
    """One image region paired with one narration clip.

    RULES:
    - t0 / t1: min start / max end over all timed words; 0 / 0 when none
    - runs: in reading order
    - image_width / image_height: the OCR-reported size of this segment's
      source image
    """

    id: str
    audio_url: str
    text: str
    t0: float
    t1: float
    runs: List[RunModel] = field(default_factory=list)
    image_width: int = 0
    image_height: int = 0

    @property
    def words(self) -> List[WordModel]:
        """Every word of the segment, in reading order of its runs."""
        return [word for run in self.runs for word in run.words]


@dataclass
class SegmentAsset:
    """Input descriptor for one segment: where its three files live."""

    id: str
    audio_url: str
    ocr_url: str
    tts_url: str
    text: str
    image_url: Optional[str] = None


@dataclass
class PageModel:
    """The assembled result of loading a batch of segment assets.

    RULES:
    - segments keep the order of the input assets
    - image_width / image_height come from the first segment
      (0 / 0 for an empty batch)
    """

    image_width: int
    image_height: int
    segments: List[SegmentModel] = field(default_factory=list)
