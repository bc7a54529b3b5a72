"""
test_discovery.py
-----------------
Marker resolution across base classes and interfaces, and the scanner's
filtering of synthetic methods.
"""
import logging

import pytest

from manageable import MalformedMarker, Managed, MarkerResolver, managed, scan
from manageable.markers import UNANNOTATED, get_marker, is_synthetic, parameter_types, return_type
from sample_objects import (
    Aliased,
    FloatRanged,
    Holder,
    IntHolder,
    Limited,
    PlainHolder,
    Ranged,
    SubWidget,
    Switch,
    VarArgs,
    Widget,
)


def _names(cls):
    return sorted(m.name for m in scan(cls).values())


def test_managed_bare_and_with_description():
    @managed
    def plain(self):
        pass

    @managed(description="hello")
    def described(self):
        pass

    assert get_marker(plain) == Managed()
    assert get_marker(described).description == "hello"


def test_managed_rejects_bad_usage():
    with pytest.raises(TypeError):
        managed(description=3)
    with pytest.raises(TypeError):
        managed(property(lambda self: 1))


def test_signature_helpers():
    assert parameter_types(Ranged.setLimit) == (int,)
    assert parameter_types(FloatRanged.setLimit) == (float,)
    # type variables erase to object
    assert parameter_types(Holder.setItem) == (object,)
    assert return_type(Holder.getItem) is object
    assert return_type(Ranged.setLimit) is type(None)
    assert parameter_types(Limited.setLimit) == (object,)
    assert parameter_types(Limited.setLimit, UNANNOTATED) == (UNANNOTATED,)
    assert return_type(Limited.getLimit, UNANNOTATED) is UNANNOTATED


def test_is_synthetic():
    assert is_synthetic("getTotal", Aliased.__dict__["getTotal"])
    assert is_synthetic("getLambda", Aliased.__dict__["getLambda"])
    assert not is_synthetic("getCount", Aliased.__dict__["getCount"])


def test_resolve_superclass_marker():
    marker = MarkerResolver().resolve(Widget, "getName", ())
    assert marker.description == "from base class"


def test_resolve_protocol_marker():
    marker = MarkerResolver().resolve(Widget, "getSize", ())
    assert marker.description == "from protocol"


def test_resolve_abc_marker():
    marker = MarkerResolver().resolve(Widget, "reset", ())
    assert marker.description == "from abc"


def test_resolve_transitive_interface_marker():
    """Marked only on an interface of a base class of the scanned type."""
    resolver = MarkerResolver()
    assert resolver.resolve(SubWidget, "getSize", ()).description == "from protocol"
    assert resolver.resolve(SubWidget, "getName", ()).description == "from base class"


def test_first_declared_interface_wins():
    assert MarkerResolver().resolve(Switch, "isOn", ()).description == "first"


def test_resolve_requires_exact_signature():
    resolver = MarkerResolver()
    assert resolver.resolve(Ranged, "setLimit", (int,)) is not None
    assert resolver.resolve(FloatRanged, "setLimit", (float,)) is None
    assert resolver.resolve(Ranged, "setLimit", (float,)) is None


def test_unannotated_override_keeps_interface_marker():
    resolver = MarkerResolver()
    # unannotated parameters match whatever the interface declares
    assert resolver.resolve(Limited, "setLimit", (UNANNOTATED,)) is not None
    assert resolver.resolve(Limited, "getLimit", ()).description == "upper bound"


def test_mismatched_marked_method_is_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="manageable.resolver"):
        assert _names(FloatRanged) == []
    assert "Ranged.setLimit is marked @managed" in caplog.text


def test_resolve_missing_method():
    assert MarkerResolver().resolve(Widget, "doesNotExist", ()) is None


def test_resolver_memoises():
    resolver = MarkerResolver()
    first = resolver.resolve(SubWidget, "getSize", ())
    assert (SubWidget, "getSize", ()) in resolver._cache
    assert resolver.resolve(SubWidget, "getSize", ()) is first


def test_scan_widget():
    assert _names(Widget) == ["getName", "getSize", "reset"]
    assert _names(SubWidget) == ["getName", "getSize", "reset"]


def test_scan_uses_effective_method():
    methods = scan(SubWidget)
    funcs = {m.name: m.func for m in methods.values()}
    assert funcs["getSize"] is Widget.getSize


def test_scan_skips_overload_with_other_signature():
    assert _names(Ranged) == ["setLimit"]
    assert _names(FloatRanged) == []


def test_scan_generic_holder():
    assert _names(PlainHolder) == ["getItem", "setItem"]
    # the int override does not match the erased signature
    assert _names(IntHolder) == ["getItem"]


def test_scan_filters_synthetic_methods():
    names = _names(Aliased)
    assert names == ["getCount", "getTraced"]
    traced = [m for m in scan(Aliased).values() if m.name == "getTraced"][0]
    assert traced.description == "wrapped"
    assert traced.returns is int


def test_scan_takes_types_from_interface():
    methods = {m.name: m for m in scan(Limited).values()}
    assert sorted(methods) == ["getLimit", "setLimit"]
    assert methods["setLimit"].params == (int,)
    assert methods["getLimit"].returns is int
    assert methods["setLimit"].func is Limited.setLimit


def test_scan_malformed_marker():
    with pytest.raises(MalformedMarker):
        scan(VarArgs)


def test_scan_requires_class():
    with pytest.raises(TypeError):
        scan(Widget())
