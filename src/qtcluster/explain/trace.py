"""Structured tracing utilities for Quality Threshold clustering runs."""

from __future__ import annotations

from dataclasses import dataclass, field
import hashlib
import json
from typing import Any, Mapping


def _normalise_for_hash(value: Any) -> Any:
    """Return a JSON-serialisable representation of ``value``."""

    if isinstance(value, Mapping):
        return {str(key): _normalise_for_hash(sub_value) for key, sub_value in sorted(value.items())}

    if isinstance(value, (list, tuple)):
        return [_normalise_for_hash(item) for item in value]

    if isinstance(value, (set, frozenset)):
        return sorted(_normalise_for_hash(item) for item in value)

    if hasattr(value, "tolist") and callable(getattr(value, "tolist")):
        return _normalise_for_hash(value.tolist())

    if isinstance(value, (str, int, float, bool)) or value is None:
        return value

    return repr(value)


def hash_payload(payload: Any) -> str:
    """Return a stable SHA-256 hash for ``payload``.

    Nested containers and ``numpy`` values are normalised first, so equal
    partitions hash equally regardless of the container types used.
    """

    normalised = _normalise_for_hash(payload)
    encoded = json.dumps(normalised, sort_keys=True, ensure_ascii=False)
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


TRACE_SCHEMA_VERSION = "v1"


@dataclass(slots=True)
class TraceRecord:
    """Trace of one extraction round."""

    cluster_id: str
    stage: str
    metadata: dict[str, Any] = field(default_factory=dict)
    working_set: dict[str, Any] = field(default_factory=dict)
    candidates: dict[str, Any] = field(default_factory=dict)
    selection: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.cluster_id = str(self.cluster_id)
        self.stage = str(self.stage)

        metadata = dict(self.metadata)
        metadata.setdefault("schema_version", TRACE_SCHEMA_VERSION)
        self.metadata = metadata

    def to_dict(self) -> dict[str, Any]:
        """Return a flattened dictionary suitable for JSON/CSV output."""

        flattened: dict[str, Any] = {
            "cluster_id": self.cluster_id,
            "stage": self.stage,
        }

        for section_name, section in (
            ("metadata", self.metadata),
            ("working_set", self.working_set),
            ("candidates", self.candidates),
            ("selection", self.selection),
        ):
            for key, value in section.items():
                flattened[f"{section_name}.{key}"] = value

        return flattened


__all__ = ["TRACE_SCHEMA_VERSION", "TraceRecord", "hash_payload"]
