"""Find the nearest @managed marker for a method signature in a class hierarchy."""

from __future__ import annotations

import inspect
import logging
from typing import Callable

from .markers import UNANNOTATED, Managed, Signature, get_marker, is_synthetic, parameter_types

logger = logging.getLogger(__name__)

Declaration = tuple[Managed, Callable]


def signatures_match(declared: Signature, params: Signature) -> bool:
    """Exact match, except that an unannotated parameter on either side matches any type."""
    if len(declared) != len(params):
        return False
    return all(a is UNANNOTATED or b is UNANNOTATED or a == b for a, b in zip(declared, params))


class MarkerResolver:
    """Walks base classes depth-first looking for a declared marker.

    The first base is searched before the others, so a superclass wins over
    the interfaces (Protocol/ABC bases) listed after it, and interfaces are
    tried in declaration order. Results are memoised per resolver; use one
    resolver per scan.
    """

    def __init__(self) -> None:
        self._cache: dict[tuple[type, str, Signature], Declaration | None] = {}

    def resolve(self, cls: type, name: str, params: Signature) -> Managed | None:
        found = self.declaration(cls, name, params)
        return found[0] if found is not None else None

    def declaration(self, cls: type, name: str, params: Signature) -> Declaration | None:
        """The marker and the function carrying it, or None."""
        key = (cls, name, params)
        if key in self._cache:
            return self._cache[key]
        found = self._find(cls, name, params)
        self._cache[key] = found
        return found

    def _find(self, cls: type, name: str, params: Signature) -> Declaration | None:
        declared = self._declared(cls, name, params)
        if declared is not None:
            marker = get_marker(declared)
            if marker is not None:
                logger.debug(f"Marker for {name}{params} found on {cls.__qualname__}")
                return marker, declared

        for base in cls.__bases__:
            if base is object:
                continue
            found = self.declaration(base, name, params)
            if found is not None:
                return found
        return None

    @staticmethod
    def _declared(cls: type, name: str, params: Signature):
        """The function declared on ``cls`` itself with a matching signature, if any."""
        func = cls.__dict__.get(name)
        if not inspect.isfunction(func) or is_synthetic(name, func):
            return None
        if not signatures_match(parameter_types(func, UNANNOTATED), params):
            if get_marker(func) is not None:
                logger.warning(f"{cls.__qualname__}.{name} is marked @managed but its parameters "
                               f"do not match {name}{params}; marker not inherited")
            return None
        return func


__all__ = ["Declaration", "MarkerResolver", "signatures_match"]
