"""Enumerate the public methods of a class and keep the ones marked @managed."""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable

from .errors import MalformedMarker
from .markers import (
    UNANNOTATED,
    Managed,
    Signature,
    is_synthetic,
    parameter_types,
    return_type,
    unsupported_parameters,
)
from .resolver import MarkerResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ManageableMethod:
    owner: type
    name: str
    func: Callable
    params: Signature
    returns: Any
    marker: Managed

    @property
    def description(self) -> str | None:
        return self.marker.description


def _candidates(cls: type):
    """Yield (name, function) for every public user-authored method on ``cls``."""
    for name in dir(cls):
        if name.startswith("_"):
            continue
        attr = inspect.getattr_static(cls, name)
        if not inspect.isfunction(attr):
            continue
        if is_synthetic(name, attr):
            logger.debug(f"Skipping synthetic method {cls.__qualname__}.{name}")
            continue
        yield name, attr


def _fill(own: Signature, declared: Signature) -> Signature:
    """Take the declared type wherever the implementation left a parameter unannotated."""
    filled = (d if p is UNANNOTATED else p for p, d in zip(own, declared))
    return tuple(object if tp is UNANNOTATED else tp for tp in filled)


def scan(cls: type, resolver: MarkerResolver | None = None) -> dict[Callable, ManageableMethod]:
    """Map each manageable method of ``cls`` to its discovery record."""
    if not isinstance(cls, type):
        raise TypeError(f"scan() expects a class, got {cls!r}")
    resolver = resolver or MarkerResolver()
    result: dict[Callable, ManageableMethod] = {}

    for name, func in _candidates(cls):
        own = parameter_types(func, UNANNOTATED)
        found = resolver.declaration(cls, name, own)
        if found is None:
            continue
        marker, declared = found
        bad = unsupported_parameters(func)
        if bad:
            raise MalformedMarker(
                f"{cls.__qualname__}.{name} is marked @managed but has parameters "
                f"that cannot be passed positionally: {', '.join(bad)}"
            )
        params = _fill(own, parameter_types(declared, UNANNOTATED))
        returns = return_type(func, UNANNOTATED)
        if returns is UNANNOTATED:
            returns = return_type(declared)
        if any(isinstance(tp, str) for tp in (*params, returns)):
            raise MalformedMarker(f"{cls.__qualname__}.{name} is marked @managed but its type hints "
                                  f"cannot be resolved")
        result[func] = ManageableMethod(
            owner=cls,
            name=name,
            func=func,
            params=params,
            returns=returns,
            marker=marker,
        )

    logger.debug(f"Scanned {cls.__qualname__}: {len(result)} manageable methods")
    return result


__all__ = ["ManageableMethod", "scan"]
