"""Abstract base formatter and output container.

WHY: Every export consumes the same PageModel IR but produces different
file content. This base class enforces a consistent interface so the CLI
can work with any formatter generically.

HOW: BaseFormatter is an ABC with two requirements: a ``name`` property
and a ``format()`` method. FormatterOutput is a plain dataclass that
bundles a file suffix with its content and MIME type.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` returns a list; most formatters return one item
- ``suffix`` starts with a hyphen, e.g. ``"-syncmap.json"``
- The caller is responsible for prepending the output stem
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from narration_sync.core.ir import PageModel


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the output stem,
                e.g. ``"-syncmap.json"`` → ``"page-12-syncmap.json"``.
        content: The file content as a string.
        media_type: MIME type for the content, e.g. ``"application/json"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all output formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'Sync Map JSON'."""

    @abstractmethod
    def format(self, page: PageModel) -> List[FormatterOutput]:
        """Convert the PageModel into one or more output files."""


def format_ms(t_ms: float) -> str:
    """Format milliseconds as ``mm:ss.mmm`` (minutes are not wrapped)."""
    total = int(round(t_ms))
    minutes, rest = divmod(total, 60_000)
    seconds, millis = divmod(rest, 1000)
    return "{:02d}:{:02d}.{:03d}".format(minutes, seconds, millis)
