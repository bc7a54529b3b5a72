"""
manageable.descriptors
----------------------
Groups manageable methods into attribute and operation descriptors.

Accessor shapes:
    getX() / get_x()      -> read accessor of attribute "X" (any non-None return)
    isX()  / is_x()       -> read accessor of attribute "X" (bool return)
    setX(v) / set_x(v)    -> write accessor of attribute "X" (value type of v)
Everything else is an operation keyed by (name, parameter types).

Accessors of one attribute that disagree on the value type are reported as
InconsistentDeclaration issues and that attribute is left out; the rest of
the object is still built.
"""

from __future__ import annotations

import dataclasses
import logging
import re
import typing
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic.errors import PydanticUserError

from .errors import InconsistentDeclaration, MalformedMarker
from .markers import Signature
from .scanner import ManageableMethod

logger = logging.getLogger(__name__)

_ACCESSOR = re.compile(r"^(get|is|set)(?:_([A-Za-z0-9].*)|([A-Z0-9].*))$")
_NONE_TYPE = type(None)


class ValueChecker:
    """Strict assignment-compatibility check for one declared type."""

    def __init__(self, declared: Any):
        self.declared = declared
        config = None if _has_own_config(declared) else ConfigDict(arbitrary_types_allowed=True)
        try:
            self._adapter = TypeAdapter(declared, config=config)
        except (PydanticUserError, TypeError, NameError) as exc:
            raise MalformedMarker(f"Unsupported type for management: {declared!r}") from exc

    def accepts(self, value: Any) -> bool:
        try:
            self._adapter.validate_python(value, strict=True)
        except ValidationError:
            return False
        return True


def _has_own_config(tp: Any) -> bool:
    if not isinstance(tp, type):
        return False
    return issubclass(tp, BaseModel) or dataclasses.is_dataclass(tp) or typing.is_typeddict(tp)


def type_name(tp: Any) -> str:
    """Readable name of a declared type, for listings."""
    if tp is _NONE_TYPE:
        return "None"
    if isinstance(tp, type) and not typing.get_args(tp):
        if tp.__module__ == "builtins":
            return tp.__qualname__
        return f"{tp.__module__}.{tp.__qualname__}"
    return repr(tp).replace("typing.", "")


@dataclass(frozen=True)
class AttributeDescriptor:
    name: str
    value_type: Any
    getter: Callable | None = None
    setter: Callable | None = None
    description: str | None = None
    checker: ValueChecker | None = field(default=None, compare=False, repr=False)

    @property
    def readable(self) -> bool:
        return self.getter is not None

    @property
    def writable(self) -> bool:
        return self.setter is not None


@dataclass(frozen=True)
class OperationDescriptor:
    name: str
    params: Signature
    returns: Any
    func: Callable
    description: str | None = None
    checkers: tuple[ValueChecker, ...] = field(default=(), compare=False, repr=False)

    @property
    def key(self) -> tuple[str, Signature]:
        return (self.name, self.params)

    def accepts(self, args: tuple) -> bool:
        if len(args) != len(self.params):
            return False
        return all(checker.accepts(arg) for checker, arg in zip(self.checkers, args))


@dataclass
class BuildResult:
    attributes: dict[str, AttributeDescriptor] = field(default_factory=dict)
    operations: dict[tuple[str, Signature], OperationDescriptor] = field(default_factory=dict)
    issues: list[InconsistentDeclaration] = field(default_factory=list)


def attribute_name(suffix: str) -> str:
    """``Count`` -> ``Count``, ``max_size`` -> ``MaxSize``."""
    if "_" not in suffix:
        return suffix[:1].upper() + suffix[1:]
    return "".join(part[:1].upper() + part[1:] for part in suffix.split("_") if part)


def classify(method: ManageableMethod) -> tuple[str, str] | None:
    """Return ("read" | "write", attribute name), or None for an operation."""
    match = _ACCESSOR.match(method.name)
    if not match:
        return None
    prefix, snake, camel = match.groups()
    name = attribute_name(snake or camel)
    if not name:
        return None
    arity = len(method.params)
    if prefix == "get" and arity == 0 and method.returns is not _NONE_TYPE:
        return ("read", name)
    if prefix == "is" and arity == 0 and method.returns is bool:
        return ("read", name)
    if prefix == "set" and arity == 1:
        return ("write", name)
    return None


def _pick(attr: str, side: str, candidates: list[ManageableMethod], issues: list) -> ManageableMethod | None:
    """Collapse same-typed duplicates; report differently-typed ones."""
    if not candidates:
        return None
    types = {_value_type(side, m) for m in candidates}
    if len(types) > 1:
        names = ", ".join(sorted(m.name for m in candidates))
        issues.append(InconsistentDeclaration(attr, f"Attribute {attr!r}: {side} accessors {names} disagree on type", log=True))
        return None
    # prefer the is-form for booleans, then a stable order
    return sorted(candidates, key=lambda m: (not m.name.startswith("is"), m.name))[0]


def _value_type(side: str, method: ManageableMethod) -> Any:
    return method.returns if side == "read" else method.params[0]


def build_descriptors(methods: Mapping[Callable, ManageableMethod] | Iterable[ManageableMethod]) -> BuildResult:
    """Build attribute and operation descriptors from scanned methods."""
    records = list(methods.values()) if isinstance(methods, Mapping) else list(methods)
    result = BuildResult()
    reads: dict[str, list[ManageableMethod]] = {}
    writes: dict[str, list[ManageableMethod]] = {}

    for method in sorted(records, key=lambda m: m.name):
        kind = classify(method)
        if kind is None:
            op = OperationDescriptor(
                name=method.name,
                params=method.params,
                returns=method.returns,
                func=method.func,
                description=method.description,
                checkers=tuple(ValueChecker(tp) for tp in method.params),
            )
            result.operations[op.key] = op
            continue
        side, name = kind
        (reads if side == "read" else writes).setdefault(name, []).append(method)

    for name in sorted(set(reads) | set(writes)):
        getter = _pick(name, "read", reads.get(name, []), result.issues)
        setter = _pick(name, "write", writes.get(name, []), result.issues)
        if (name in reads and getter is None) or (name in writes and setter is None):
            continue
        if getter and setter and getter.returns != setter.params[0]:
            result.issues.append(InconsistentDeclaration(
                name,
                f"Attribute {name!r}: {getter.name} returns {type_name(getter.returns)} "
                f"but {setter.name} takes {type_name(setter.params[0])}",
                log=True,
            ))
            continue
        value_type = getter.returns if getter else setter.params[0]
        description = (getter and getter.description) or (setter and setter.description) or None
        result.attributes[name] = AttributeDescriptor(
            name=name,
            value_type=value_type,
            getter=getter.func if getter else None,
            setter=setter.func if setter else None,
            description=description,
            checker=ValueChecker(value_type) if setter else None,
        )

    logger.debug(f"Built {len(result.attributes)} attributes, {len(result.operations)} operations, "
                 f"{len(result.issues)} issues")
    return result


__all__ = [
    "AttributeDescriptor",
    "BuildResult",
    "OperationDescriptor",
    "ValueChecker",
    "attribute_name",
    "build_descriptors",
    "classify",
    "type_name",
]
