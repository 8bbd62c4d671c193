"""Output formatter registry — pluggable export hub.

WHY: The CLI needs a single lookup to find the right formatter by name.
A central dict makes it trivial to add new formats: create the formatter
class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["sync_map"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Type

from narration_sync.formatters.plain_text import PlainTextFormatter
from narration_sync.formatters.progress_track import ProgressTrackFormatter
from narration_sync.formatters.sync_map import SyncMapFormatter

if TYPE_CHECKING:
    from narration_sync.formatters.base import BaseFormatter

FORMATTERS: Dict[str, Type[BaseFormatter]] = {
    "sync_map": SyncMapFormatter,
    "plain_text": PlainTextFormatter,
    "progress_track": ProgressTrackFormatter,
}
