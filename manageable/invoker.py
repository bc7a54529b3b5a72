"""Attribute reads/writes and operation calls against an exported object."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Sequence

from .descriptors import OperationDescriptor, type_name
from .errors import AttributeNotFound, InstanceNotFound, InvalidValue, InvocationFailure, OperationNotFound
from .markers import Signature

if TYPE_CHECKING:
    from .exporter import ExportedObject

logger = logging.getLogger(__name__)


def _live(entry: ExportedObject) -> Any:
    obj = entry.target()
    if obj is None:
        raise InstanceNotFound(f"Object exported as {entry.name!r} no longer exists")
    return obj


def _call(member: str, func, obj: Any, *args: Any) -> Any:
    try:
        return func(obj, *args)
    except Exception as exc:
        logger.debug(f"{member} raised {type(exc).__name__}: {exc}")
        raise InvocationFailure(member, exc) from exc


def get_attribute(entry: ExportedObject, name: str) -> Any:
    descriptor = entry.attributes.get(name)
    if descriptor is None or descriptor.getter is None:
        logger.warning(f"{entry.name}: no readable attribute {name!r}")
        raise AttributeNotFound(f"No readable attribute {name!r} on {entry.name!r}")
    obj = _live(entry)
    return _call(f"{entry.name}.{name}", descriptor.getter, obj)


def set_attribute(entry: ExportedObject, name: str, value: Any) -> None:
    descriptor = entry.attributes.get(name)
    if descriptor is None or descriptor.setter is None:
        logger.warning(f"{entry.name}: no writable attribute {name!r}")
        raise AttributeNotFound(f"No writable attribute {name!r} on {entry.name!r}")
    if not descriptor.checker.accepts(value):
        logger.warning(f"{entry.name}: rejected {value!r} for {name!r}")
        raise InvalidValue(
            f"Attribute {name!r} expects {type_name(descriptor.value_type)}, got {type(value).__name__}"
        )
    obj = _live(entry)
    _call(f"{entry.name}.{name}", descriptor.setter, obj, value)


def _signature_matches(op: OperationDescriptor, signature: Signature) -> bool:
    """Compare against types, or against the type names published by the listings."""
    if signature and all(isinstance(tp, str) for tp in signature):
        return tuple(type_name(tp) for tp in op.params) == signature
    return op.params == signature


def find_operation(entry: ExportedObject, name: str, args: Sequence[Any],
                   signature: Sequence[Any] | None = None) -> OperationDescriptor:
    """Pick the operation to call.

    ``signature`` may hold parameter types or their listed names
    (``OperationInfo.params``); without it the first operation whose
    parameters accept ``args`` is used.
    """
    args = tuple(args)
    wanted = tuple(signature) if signature is not None else None
    for (op_name, _), op in entry.operations.items():
        if op_name != name:
            continue
        if wanted is not None and not _signature_matches(op, wanted):
            continue
        if op.accepts(args):
            return op
    logger.warning(f"{entry.name}: no operation {name!r} for {len(args)} argument(s)")
    raise OperationNotFound(f"No operation {name!r} on {entry.name!r} matches the given arguments")


def invoke_operation(entry: ExportedObject, name: str, args: Sequence[Any] = (),
                     signature: Sequence[Any] | None = None) -> Any:
    op = find_operation(entry, name, args, signature)
    obj = _live(entry)
    return _call(f"{entry.name}.{name}", op.func, obj, *tuple(args))


__all__ = ["find_operation", "get_attribute", "invoke_operation", "set_attribute"]
