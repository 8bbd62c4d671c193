"""Bundled JSON Schemas and a cached loader.

WHY: OCR, TTS, manifest, and sync-map documents cross a process boundary
as JSON. Validating their structure up front gives one clear error
instead of a KeyError deep inside assembly.

HOW: Each schema is a ``*.schema.json`` file next to this module, loaded
once and cached. ``validate`` wraps jsonschema and re-raises failures as
the caller's error type.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Type

import jsonschema

_SCHEMA_DIR = Path(__file__).resolve().parent

_CACHED_SCHEMAS: Dict[str, Dict[str, Any]] = {}


def get_schema(name: str) -> Dict[str, Any]:
    """Load and cache ``{name}.schema.json``."""
    if name not in _CACHED_SCHEMAS:
        with open(_SCHEMA_DIR / "{}.schema.json".format(name), encoding="utf-8") as f:
            _CACHED_SCHEMAS[name] = json.load(f)
    return _CACHED_SCHEMAS[name]


def validate(instance: Any, name: str, error_cls: Type[Exception], label: str) -> None:
    """Validate ``instance`` against a bundled schema.

    Raises:
        error_cls: With ``label`` and the first validation message.
    """
    try:
        jsonschema.validate(instance=instance, schema=get_schema(name))
    except jsonschema.ValidationError as e:
        path = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise error_cls("Invalid {} at {}: {}".format(label, path, e.message)) from e
