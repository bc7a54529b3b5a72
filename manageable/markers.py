"""
manageable.markers
------------------
The ``@managed`` marker and the helpers that read method signatures.

Usage:
    class Pool:
        @managed(description="Connections currently open")
        def getActive(self) -> int: ...

        @managed
        def reset(self) -> None: ...
"""

from __future__ import annotations

import inspect
import typing
from dataclasses import dataclass
from typing import Any, Callable

MARKER_ATTR = "__managed__"
SYNTHETIC_ATTR = "__synthetic__"

Signature = tuple[Any, ...]

# placeholder for a parameter or return value without a type hint
UNANNOTATED = inspect.Parameter.empty


@dataclass(frozen=True)
class Managed:
    """Marker metadata attached to a manageable method."""

    description: str | None = None


def managed(func: Callable | None = None, *, description: str | None = None):
    """Mark a method as part of the manageable surface.

    Works bare (``@managed``) or with arguments
    (``@managed(description="...")``).
    """
    if description is not None and not isinstance(description, str):
        raise TypeError(f"description must be a string, got {type(description).__name__}")

    def decorator(fn: Callable) -> Callable:
        if not inspect.isfunction(fn):
            raise TypeError(f"@managed can only mark functions, got {fn!r}")
        setattr(fn, MARKER_ATTR, Managed(description=description))
        return fn

    if func is not None:
        return decorator(func)
    return decorator


def get_marker(func: Any) -> Managed | None:
    marker = getattr(func, MARKER_ATTR, None)
    return marker if isinstance(marker, Managed) else None


def is_synthetic(attr_name: str, func: Any) -> bool:
    """True for generated duplicates that are not user-authored methods.

    Covers aliases bound under another name (``getSize = get_size``),
    lambdas, and functions flagged with ``__synthetic__``.
    """
    if getattr(func, SYNTHETIC_ATTR, False):
        return True
    return getattr(func, "__name__", None) != attr_name


def _erase(tp: Any) -> Any:
    if isinstance(tp, typing.TypeVar):
        return tp.__bound__ if tp.__bound__ is not None else object
    return tp


def _hints(func: Callable) -> dict[str, Any]:
    target = inspect.unwrap(func)
    try:
        return typing.get_type_hints(target)
    except (NameError, TypeError):
        # unresolvable forward refs: fall back to the raw annotations
        return dict(getattr(target, "__annotations__", {}))


def _parameters(func: Callable) -> list[inspect.Parameter]:
    params = list(inspect.signature(inspect.unwrap(func)).parameters.values())
    return params[1:]  # drop self


def parameter_types(func: Callable, unannotated: Any = object) -> Signature:
    """Positional parameter types of a method, ``self`` excluded.

    Parameters without a type hint are reported as ``unannotated``.
    """
    hints = _hints(func)
    return tuple(
        _erase(hints[p.name]) if p.name in hints else unannotated
        for p in _parameters(func)
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
    )


def return_type(func: Callable, unannotated: Any = object) -> Any:
    hints = _hints(func)
    if "return" not in hints:
        return unannotated
    tp = hints["return"]
    return type(None) if tp is None else _erase(tp)


def unsupported_parameters(func: Callable) -> list[str]:
    """Names of parameters that positional invocation cannot fill."""
    bad = []
    for p in _parameters(func):
        if p.kind in (p.VAR_POSITIONAL, p.VAR_KEYWORD):
            bad.append(p.name)
        elif p.kind == p.KEYWORD_ONLY and p.default is p.empty:
            bad.append(p.name)
    return bad


__all__ = [
    "MARKER_ATTR",
    "UNANNOTATED",
    "Managed",
    "Signature",
    "get_marker",
    "is_synthetic",
    "managed",
    "parameter_types",
    "return_type",
    "unsupported_parameters",
]
