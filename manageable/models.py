"""Pydantic models for exporter settings and for the listings handed to a protocol server."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import json
import yaml
from pydantic import BaseModel, Field, ValidationError

from .descriptors import AttributeDescriptor, OperationDescriptor, type_name


class AttributeInfo(BaseModel):
    """One attribute as seen by a management client."""

    name: str
    type: str
    readable: bool
    writable: bool
    description: str | None = None

    @classmethod
    def from_descriptor(cls, descriptor: AttributeDescriptor) -> AttributeInfo:
        return cls(
            name=descriptor.name,
            type=type_name(descriptor.value_type),
            readable=descriptor.readable,
            writable=descriptor.writable,
            description=descriptor.description,
        )


class OperationInfo(BaseModel):
    """One operation as seen by a management client."""

    name: str
    params: list[str] = Field(default_factory=list)
    returns: str
    description: str | None = None

    @classmethod
    def from_descriptor(cls, descriptor: OperationDescriptor) -> OperationInfo:
        return cls(
            name=descriptor.name,
            params=[type_name(tp) for tp in descriptor.params],
            returns=type_name(descriptor.returns),
            description=descriptor.description,
        )


class ExporterSettings(BaseModel):
    """Behaviour switches for an Exporter and the CLI."""

    fail_on_inconsistent: bool = Field(
        default=False, description="Refuse the whole export when any attribute is inconsistent"
    )
    replace_existing: bool = Field(
        default=False, description="Exporting under a taken name replaces the old entry"
    )
    app_name: str = Field(default="manageable", min_length=1, description="Name used for log files")
    log_level: str = Field(default="INFO", description="Logging level name")
    logfile: str | None = Field(default=None, description="Log file path (default ~/.<app_name>/log.txt)")

    def merge(self, patch: Mapping[str, Any]) -> ExporterSettings:
        """Return new settings with ``patch`` applied."""
        payload = self.model_dump(mode="python")
        payload.update(patch)
        return ExporterSettings.model_validate(payload)


# ---------------------------------------------------------------------------
# helpers


def coerce_settings(value: Any) -> ExporterSettings:
    """Normalize supported inputs into ExporterSettings."""
    if value is None:
        return ExporterSettings()
    if isinstance(value, ExporterSettings):
        return value
    payload: Mapping[str, Any]
    if isinstance(value, Mapping):
        payload = value
    elif isinstance(value, Path):
        payload = _load_text_payload(value.read_text())
    elif isinstance(value, (str, bytes)):
        payload = _load_text_payload(value)
    else:
        raise TypeError("Unsupported value for exporter settings")
    try:
        return ExporterSettings.model_validate(payload)
    except ValidationError as exc:
        raise ValueError("Invalid exporter settings payload") from exc


def _load_text_payload(raw: str | bytes) -> dict[str, Any]:
    """Interpret raw text as YAML first, falling back to JSON."""
    text = raw.decode() if isinstance(raw, bytes) else raw
    try:
        return yaml.safe_load(text) or {}
    except yaml.YAMLError:
        return json.loads(text)


__all__ = [
    "AttributeInfo",
    "ExporterSettings",
    "OperationInfo",
    "coerce_settings",
]
