"""Shared test fixtures for the narration_sync test suite.

WHY: Most test modules need the same small two-column page: an OCR
document, a TTS document that references it (including malformed
tokens), and a manifest tying them together on disk.

HOW: Module-level constants hold the raw JSON documents; fixtures hand
out fresh copies, parsed payloads, and a manifest written to tmp_path.

RULES:
- SAMPLE_OCR: 1000x800 image, 8 words, two columns, two lines each
- SAMPLE_TTS: times words 0-6, leaves word 7 ("fox") untimed, and
  includes tokens that must be skipped
- Expected runs (reading order): "Once upon a", "lived a", "time there", "fox"
"""

import copy
import json
from typing import Any, Dict, List, Optional

import pytest

from narration_sync.api.models import OcrPayload, TtsPayload
from narration_sync.core.geometry import union_bbox
from narration_sync.core.ir import BBox, RunModel, SegmentAsset, WordModel, WordTiming


# ---------------------------------------------------------------------------
# Sample documents
# ---------------------------------------------------------------------------

def _ocr_word(text: str, cx: float, cy: float, w: float, h: float, angle: float = 0) -> Dict[str, Any]:
    return {"text": text, "rotated_rect": [cx, cy, w, h, angle]}


SAMPLE_OCR: Dict[str, Any] = {
    "code": 0,
    "data": {
        "width": 1000,
        "height": 800,
        "words": [
            _ocr_word("Once",  100, 110,  80, 20),   # idx 0 -> x=60,  y=100
            _ocr_word("upon",  200, 110,  80, 20),   # idx 1 -> x=160, y=100
            _ocr_word("a",     270, 110,  20, 20),   # idx 2 -> x=260, y=100
            _ocr_word("time",  110, 160, 100, 20),   # idx 3 -> x=60,  y=150
            _ocr_word("there", 230, 160, 100, 20),   # idx 4 -> x=180, y=150
            _ocr_word("lived", 700, 112,  80, 20),   # idx 5 -> x=660, y=102
            _ocr_word("a",     780, 112,  20, 20),   # idx 6 -> x=770, y=102
            _ocr_word("fox",   700, 162,  60, 20),   # idx 7 -> x=670, y=152
        ],
    },
}

SAMPLE_TTS: Dict[str, Any] = {
    "header": {"voice": "narrator"},
    "payload": {
        "subtitles": [
            {"text": "Once",  "begin_time": 0,    "end_time": 300,  "begin_index": 0, "end_index": 0},
            {"text": "upon",  "begin_time": 350,  "end_time": 600,  "begin_index": 1, "end_index": 1},
            {"text": "a",     "begin_time": 650,  "end_time": 700,  "begin_index": 2, "end_index": 2},
            {"text": "ti",    "begin_time": 800,  "end_time": 1100, "begin_index": 3, "end_index": 3},
            {"text": "me",    "begin_time": 1050, "end_time": 1200, "begin_index": 3, "end_index": 3},
            {"text": "there", "begin_time": 1250, "end_time": 1500, "begin_index": 4, "end_index": 4},
            {"text": "lived", "begin_time": 1600, "end_time": 1900, "begin_index": 5, "end_index": 5},
            {"text": "a",     "begin_time": 1950, "end_time": 2000, "begin_index": 6, "end_index": 6},
            {"text": ",",     "begin_time": 2000, "end_time": 2050},
            {"text": "ghost", "begin_time": 2100, "end_time": 2200, "begin_index": 99},
            {"text": "str",   "begin_time": 2100, "end_time": 2200, "begin_index": "3"},
        ],
    },
}

SAMPLE_TEXT = "Once upon a time there lived a fox"


@pytest.fixture
def sample_ocr_dict():
    return copy.deepcopy(SAMPLE_OCR)


@pytest.fixture
def sample_tts_dict():
    return copy.deepcopy(SAMPLE_TTS)


@pytest.fixture
def sample_ocr(sample_ocr_dict):
    return OcrPayload.parse(sample_ocr_dict)


@pytest.fixture
def sample_tts(sample_tts_dict):
    return TtsPayload.parse(sample_tts_dict)


@pytest.fixture
def sample_asset():
    return SegmentAsset(
        id="seg-1",
        audio_url="audio/seg-1.mp3",
        ocr_url="ocr/seg-1.json",
        tts_url="tts/seg-1.json",
        text=SAMPLE_TEXT,
    )


# ---------------------------------------------------------------------------
# On-disk page: manifest + assets for two segments
# ---------------------------------------------------------------------------

def build_manifest(segment_ids: List[str]) -> Dict[str, Any]:
    return {
        "dataset": "fixture-book",
        "image": "page.png",
        "source": {"image": "page.png", "audio": "full.mp3", "ocr": "full-ocr.json", "tts": "full-tts.json"},
        "segment_count": len(segment_ids),
        "segments": [
            {
                "id": seg_id,
                "image": "page.png",
                "audio": "audio/{}.mp3".format(seg_id),
                "ocr": "ocr/{}.json".format(seg_id),
                "tts": "tts/{}.json".format(seg_id),
                "global_time_range_ms": [i * 2050, (i + 1) * 2050],
                "duration_ms": 2050,
                "word_index_range": [i * 8, i * 8 + 7],
                "text": SAMPLE_TEXT,
            }
            for i, seg_id in enumerate(segment_ids)
        ],
    }


def write_page(root, segment_ids: List[str], ocr: Optional[Dict[str, Any]] = None) -> Any:
    """Write a manifest plus OCR/TTS files under ``root``; return the manifest path."""
    (root / "ocr").mkdir(exist_ok=True)
    (root / "tts").mkdir(exist_ok=True)
    for seg_id in segment_ids:
        (root / "ocr" / "{}.json".format(seg_id)).write_text(json.dumps(ocr or SAMPLE_OCR))
        (root / "tts" / "{}.json".format(seg_id)).write_text(json.dumps(SAMPLE_TTS))
    manifest_path = root / "manifest.json"
    manifest_path.write_text(json.dumps(build_manifest(segment_ids)))
    return manifest_path


@pytest.fixture
def page_dir(tmp_path):
    """A directory holding a two-segment page; yields the manifest path."""
    return write_page(tmp_path, ["seg-1", "seg-2"])


# ---------------------------------------------------------------------------
# Hand-built words and runs
# ---------------------------------------------------------------------------

def make_word(
    idx: int,
    x: float,
    y: float = 0,
    w: float = 100,
    h: float = 20,
    t0: Optional[float] = None,
    t1: Optional[float] = None,
    text: Optional[str] = None,
) -> WordModel:
    return WordModel(
        id="word-{}".format(idx),
        idx=idx,
        text=text if text is not None else "w{}".format(idx),
        bbox=BBox(x=x, y=y, w=w, h=h),
        timing=WordTiming(t0=t0, t1=t1) if t0 is not None else None,
    )


def make_run(words: List[WordModel], run_id: str = "seg-run-1") -> RunModel:
    return RunModel(id=run_id, bbox=union_bbox(words), words=list(words))
