"""
manageable.exporter
-------------------
Registry of exported objects, addressed by an external name.

Holds in-memory entries that bind attribute/operation descriptors to a live
object. Entries keep only a weak reference to the object: its owner decides
when it goes away, and requests against a collected object fail with
InstanceNotFound.

Example:
    exporter = Exporter()
    exporter.export("pool", pool)
    exporter.set_attribute("pool", "MaxSize", 20)
    exporter.invoke_operation("pool", "reset")
    exporter.unexport("pool")
"""

from __future__ import annotations

import logging
import threading
import weakref
from dataclasses import dataclass, field
from typing import Any, Sequence

from . import invoker
from .descriptors import AttributeDescriptor, OperationDescriptor, build_descriptors
from .errors import ExportError, InconsistentDeclaration, InstanceAlreadyExists, InstanceNotFound
from .markers import Signature
from .models import AttributeInfo, ExporterSettings, OperationInfo, coerce_settings
from .scanner import scan

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportedObject:
    """Descriptors of one exported object plus a weak reference to it."""

    name: str
    cls: type
    target: weakref.ref
    attributes: dict[str, AttributeDescriptor] = field(default_factory=dict)
    operations: dict[tuple[str, Signature], OperationDescriptor] = field(default_factory=dict)
    issues: tuple[InconsistentDeclaration, ...] = ()

    @property
    def alive(self) -> bool:
        return self.target() is not None

    def attribute_infos(self) -> list[AttributeInfo]:
        return [AttributeInfo.from_descriptor(d) for _, d in sorted(self.attributes.items())]

    def operation_infos(self) -> list[OperationInfo]:
        ops = sorted(self.operations.values(), key=lambda op: (op.name, len(op.params)))
        return [OperationInfo.from_descriptor(op) for op in ops]


class Exporter:
    """Exports objects and serves get/set/invoke requests against them."""

    def __init__(self, settings: Any = None):
        self.settings: ExporterSettings = coerce_settings(settings)
        self._entries: dict[str, ExportedObject] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------ export

    def build(self, name: str, obj: Any) -> ExportedObject:
        """Scan ``obj``'s class and build an entry without registering it."""
        cls = type(obj)
        try:
            target = weakref.ref(obj)
        except TypeError as exc:
            raise ExportError(f"Cannot export {cls.__qualname__} as {name!r}: "
                              f"instances do not support weak references") from exc

        result = build_descriptors(scan(cls))
        if result.issues and self.settings.fail_on_inconsistent:
            first = result.issues[0]
            details = "; ".join(issue.message for issue in result.issues)
            raise InconsistentDeclaration(
                first.attribute, f"Inconsistent declarations on {cls.__qualname__}: {details}"
            ) from first

        return ExportedObject(
            name=name,
            cls=cls,
            target=target,
            attributes=result.attributes,
            operations=result.operations,
            issues=tuple(result.issues),
        )

    def export(self, name: str, obj: Any) -> ExportedObject:
        """Export ``obj`` under ``name``. Discovery errors surface here."""
        if not isinstance(name, str) or not name.strip():
            raise ExportError(f"Invalid export name: {name!r}")
        entry = self.build(name, obj)
        with self._lock:
            if name in self._entries and not self.settings.replace_existing:
                raise InstanceAlreadyExists(f"An object is already exported as {name!r}")
            self._entries[name] = entry
        logger.info(f"Exported {entry.cls.__qualname__} as {name!r}: "
                    f"{len(entry.attributes)} attributes, {len(entry.operations)} operations")
        return entry

    def unexport(self, name: str) -> None:
        with self._lock:
            if name not in self._entries:
                raise InstanceNotFound(f"Nothing exported as {name!r}")
            del self._entries[name]
        logger.info(f"Unexported {name!r}")

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._entries)

    def is_exported(self, name: str) -> bool:
        with self._lock:
            return name in self._entries

    def entry(self, name: str) -> ExportedObject:
        with self._lock:
            entry = self._entries.get(name)
        if entry is None:
            raise InstanceNotFound(f"Nothing exported as {name!r}")
        return entry

    # ---------------------------------------------------------------- requests

    def list_attributes(self, name: str) -> list[AttributeInfo]:
        return self.entry(name).attribute_infos()

    def list_operations(self, name: str) -> list[OperationInfo]:
        return self.entry(name).operation_infos()

    def get_attribute(self, name: str, attribute: str) -> Any:
        return invoker.get_attribute(self.entry(name), attribute)

    def set_attribute(self, name: str, attribute: str, value: Any) -> None:
        invoker.set_attribute(self.entry(name), attribute, value)

    def invoke_operation(self, name: str, operation: str, args: Sequence[Any] = (),
                         signature: Sequence[Any] | None = None) -> Any:
        return invoker.invoke_operation(self.entry(name), operation, args, signature)


__all__ = ["ExportedObject", "Exporter"]
