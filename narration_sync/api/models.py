"""OCR and TTS payload dataclasses.

WHY: The OCR and TTS services hand us plain JSON documents. Typed
dataclasses make the fields explicit and keep the "is this token
usable?" decisions in one place instead of scattered through assembly.

HOW: Each dataclass maps 1:1 to a JSON object. ``parse`` validates the
whole document against its bundled schema, then ``from_dict`` builds the
typed objects. Token-level fields that may be malformed are normalized
to None rather than rejected.

RULES:
- OCR rotated_rect is ``[cx, cy, w, h, angle]``; (cx, cy) is the box centre
- angle defaults to 0.0 when the rect has only four numbers
- TtsToken.begin_index is None unless it is an integral, non-bool number
- TtsToken.begin_time / end_time are None unless numeric
- A TTS document without payload.subtitles yields zero tokens
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field
from typing import Any, List, Optional

from narration_sync.schemas import validate


class PayloadError(ValueError):
    """Raised when an OCR or TTS document is structurally invalid.

    WHY: A missing or malformed asset means the segment cannot be
    synchronized at all; callers need a typed error to report it.

    RULES:
    - Message names the document kind and the failing JSON path
    """


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    if not math.isfinite(value):
        return None
    return value


def _as_index(value: Any) -> Optional[int]:
    number = _as_number(value)
    if number is None or number != int(number):
        return None
    return int(number)


@dataclass
class OcrWord:
    """One OCR word record with its centre-based rectangle."""

    text: str
    cx: float
    cy: float
    w: float
    h: float
    angle: float = 0.0

    @classmethod
    def from_dict(cls, data: dict) -> OcrWord:
        rect = data["rotated_rect"]
        return cls(
            text=data["text"],
            cx=rect[0],
            cy=rect[1],
            w=rect[2],
            h=rect[3],
            angle=rect[4] if len(rect) > 4 else 0.0,
        )


@dataclass
class OcrPayload:
    """The OCR response: source image size plus word records in reading order."""

    width: int
    height: int
    words: List[OcrWord] = field(default_factory=list)
    code: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict) -> OcrPayload:
        body = data["data"]
        return cls(
            width=body["width"],
            height=body["height"],
            words=[OcrWord.from_dict(w) for w in body["words"]],
            code=data.get("code"),
        )

    @classmethod
    def parse(cls, data: Any, source: str = "OCR payload") -> OcrPayload:
        """Validate a raw OCR document and build the payload.

        Raises:
            PayloadError: If the document does not match the OCR schema.
        """
        validate(data, "ocr", PayloadError, source)
        return cls.from_dict(data)


@dataclass
class TtsToken:
    """One subtitle token from the TTS pass.

    WHY: Tokens reference OCR words by index; the timing attacher maps
    them back. Some synthesizers emit tokens without an index (pauses,
    punctuation) or with garbage values; those must be skipped quietly.
    """

    text: str
    begin_time: Optional[float]
    end_time: Optional[float]
    begin_index: Optional[int] = None
    end_index: Optional[int] = None

    @property
    def is_usable(self) -> bool:
        """True when the token carries an index and both timestamps."""
        return (
            self.begin_index is not None
            and self.begin_time is not None
            and self.end_time is not None
        )

    @classmethod
    def from_dict(cls, data: dict) -> TtsToken:
        text = data.get("text")
        return cls(
            text=text if isinstance(text, str) else "",
            begin_time=_as_number(data.get("begin_time")),
            end_time=_as_number(data.get("end_time")),
            begin_index=_as_index(data.get("begin_index")),
            end_index=_as_index(data.get("end_index")),
        )


@dataclass
class TtsPayload:
    """The TTS response: header metadata plus ordered subtitle tokens."""

    header: dict = field(default_factory=dict)
    subtitles: List[TtsToken] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> TtsPayload:
        payload = data.get("payload") or {}
        return cls(
            header=data.get("header") or {},
            subtitles=[TtsToken.from_dict(t) for t in payload.get("subtitles") or []],
        )

    @classmethod
    def parse(cls, data: Any, source: str = "TTS payload") -> TtsPayload:
        """Validate a raw TTS document and build the payload.

        Raises:
            PayloadError: If the document does not match the TTS schema.
        """
        validate(data, "tts", PayloadError, source)
        return cls.from_dict(data)
