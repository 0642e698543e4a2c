"""Tests for get/set/delete/has chain traversal."""

import pytest

from protochain import (
    UNDEFINED,
    AccessorDescriptor,
    NotConfigurableError,
    NotExtensibleError,
    ObjectModelTypeError,
    ReadOnlyError,
    ValueDescriptor,
)


@pytest.fixture
def chain(realm):
    """Three objects linked a -> b -> c -> None."""
    c = realm.create_object()
    b = realm.create_object(c)
    a = realm.create_object(b)
    return a, b, c


class TestGet:
    """Test property lookup."""

    def test_missing_is_undefined(self, realm, chain):
        """A key found nowhere yields undefined."""
        a, _, _ = chain
        assert realm.get(a, "missing") is UNDEFINED

    def test_nearest_ancestor_wins(self, realm, chain):
        """The nearest holder of a key supplies its value."""
        a, b, c = chain
        realm.set(c, "k", "from c")
        assert realm.get(a, "k") == "from c"
        realm.set(b, "k", "from b")
        assert realm.get(a, "k") == "from b"
        realm.set(a, "k", "from a")
        assert realm.get(a, "k") == "from a"
        assert realm.get(b, "k") == "from b"

    def test_getter_bound_to_receiver(self, realm, chain):
        """Inherited getters read fields from the original receiver."""
        a, _, c = chain
        realm.define_own(c, "label", AccessorDescriptor(get=lambda this: realm.get(this, "name")))
        realm.set(c, "name", "c")
        realm.set(a, "name", "a")
        assert realm.get(a, "label") == "a"
        assert realm.get(c, "label") == "c"

    def test_explicit_receiver(self, realm, chain):
        """Getters run against an explicitly given receiver."""
        a, _, c = chain
        other = realm.create_object()
        realm.set(other, "name", "other")
        realm.define_own(c, "label", AccessorDescriptor(get=lambda this: realm.get(this, "name")))
        assert realm.get(a, "label", other) == "other"

    def test_setter_only_shadows_inherited_getter(self, realm, chain):
        """A setter-only accessor stops resolution and yields undefined."""
        a, b, c = chain
        realm.define_own(c, "x", AccessorDescriptor(get=lambda this: "inherited"))
        assert realm.get(a, "x") == "inherited"
        realm.define_own(b, "x", AccessorDescriptor(set=lambda this, v: None))
        assert realm.get(a, "x") is UNDEFINED

    def test_undefined_value_still_shadows(self, realm, chain):
        """Storing undefined keeps the key and its shadowing."""
        a, _, c = chain
        realm.set(c, "k", 1)
        realm.set(a, "k", UNDEFINED)
        assert realm.get(a, "k") is UNDEFINED
        assert realm.has(a, "k")
        assert realm.delete(a, "k") is True
        assert realm.get(a, "k") == 1

    def test_get_on_non_object(self, realm):
        """Reading from a non-object is rejected."""
        with pytest.raises(ObjectModelTypeError):
            realm.get("string", "length")


class TestSet:
    """Test property assignment."""

    def test_creates_own_property(self, realm, chain):
        """Assignment creates an own property on the receiver only."""
        a, b, c = chain
        realm.set(c, "k", "c")
        assert realm.set(a, "k", "a") is True
        assert realm.get(a, "k") == "a"
        assert realm.get(c, "k") == "c"
        assert not realm.has_own(b, "k")

    def test_new_property_flags(self, realm):
        """Assigned properties are writable, enumerable and configurable."""
        obj = realm.create_object()
        realm.set(obj, "k", 1)
        assert realm.read_own(obj, "k") == ValueDescriptor(1, True, True, True)

    def test_overwrite_keeps_flags(self, realm):
        """Overwriting an own value keeps its flags."""
        obj = realm.create_object()
        realm.define_own(obj, "k", ValueDescriptor(1, enumerable=False, configurable=False))
        realm.set(obj, "k", 2)
        assert realm.read_own(obj, "k") == ValueDescriptor(2, True, False, False)

    def test_inherited_setter_invoked(self, realm, chain):
        """An inherited setter runs against the receiver."""
        a, _, c = chain

        def setter(this, value):
            realm.define_own(this, "_stored", ValueDescriptor(value * 2))

        realm.define_own(c, "x", AccessorDescriptor(set=setter))
        assert realm.set(a, "x", 5) is True
        assert realm.get(a, "_stored") == 10
        assert not realm.has_own(c, "_stored")
        assert not realm.has_own(a, "x")

    def test_getter_only_write_dropped(self, realm, chain):
        """Writing through a getter-only accessor is dropped."""
        a, _, c = chain
        realm.define_own(c, "x", AccessorDescriptor(get=lambda this: 1))
        assert realm.set(a, "x", 2) is False
        assert not realm.has_own(a, "x")
        assert realm.get(a, "x") == 1

    def test_getter_only_write_strict(self, strict_realm):
        """Strict mode rejects writing through a getter-only accessor."""
        parent = strict_realm.create_object()
        child = strict_realm.create_object(parent)
        strict_realm.define_own(parent, "x", AccessorDescriptor(get=lambda this: 1))
        with pytest.raises(ReadOnlyError):
            strict_realm.set(child, "x", 2)
        assert not strict_realm.has_own(child, "x")

    def test_own_value_shadows_inherited_setter(self, realm, chain):
        """The first match decides: an own value is overwritten directly."""
        a, _, c = chain
        calls = []
        realm.define_own(c, "x", AccessorDescriptor(set=lambda this, v: calls.append(v)))
        realm.define_own(a, "x", ValueDescriptor(0))
        realm.set(a, "x", 1)
        assert calls == []
        assert realm.get(a, "x") == 1

    def test_read_only_own_value(self, realm, strict_realm):
        """A read-only own value rejects writes."""
        obj = realm.create_object()
        realm.define_own(obj, "x", ValueDescriptor(1, writable=False))
        assert realm.set(obj, "x", 2) is False
        assert realm.get(obj, "x") == 1

        obj = strict_realm.create_object()
        strict_realm.define_own(obj, "x", ValueDescriptor(1, writable=False))
        with pytest.raises(ReadOnlyError):
            strict_realm.set(obj, "x", 2)

    def test_inherited_read_only_value_does_not_block(self, realm, chain):
        """An inherited read-only value is shadowed by the write."""
        a, _, c = chain
        realm.define_own(c, "x", ValueDescriptor(1, writable=False))
        assert realm.set(a, "x", 2) is True
        assert realm.get(a, "x") == 2
        assert realm.get(c, "x") == 1

    def test_non_extensible_receiver(self, realm, strict_realm):
        """A non-extensible receiver gets no new keys."""
        obj = realm.create_object()
        realm.prevent_extensions(obj)
        assert realm.set(obj, "x", 1) is False
        assert not realm.has_own(obj, "x")

        obj = strict_realm.create_object()
        strict_realm.prevent_extensions(obj)
        with pytest.raises(NotExtensibleError):
            strict_realm.set(obj, "x", 1)

    def test_receiver_gets_the_write(self, realm, chain):
        """The write lands on the receiver, not the lookup start."""
        a, _, c = chain
        other = realm.create_object()
        realm.set(a, "k", 1, receiver=other)
        assert realm.get(other, "k") == 1
        assert not realm.has_own(a, "k")


class TestDelete:
    """Test non-propagating delete."""

    def test_unshadows_ancestor(self, realm, chain):
        """Deleting an own key exposes the ancestor's value."""
        a, _, c = chain
        realm.set(c, "k", "ancestor")
        realm.set(a, "k", "own")
        assert realm.delete(a, "k") is True
        assert realm.get(a, "k") == "ancestor"

    def test_inherited_only_is_noop(self, realm, chain):
        """Deleting a key that lives only on an ancestor returns True."""
        a, _, c = chain
        realm.set(c, "k", 1)
        assert realm.delete(a, "k") is True
        assert realm.get(a, "k") == 1
        assert realm.has_own(c, "k")

    def test_missing_returns_false(self, realm, strict_realm):
        """Deleting a key found nowhere on the chain is a no-op returning False."""
        obj = realm.create_object()
        assert realm.delete(obj, "nothing") is False
        obj = strict_realm.create_object()
        assert strict_realm.delete(obj, "nothing") is False

    def test_non_configurable(self, realm, strict_realm):
        """A non-configurable own key survives delete."""
        obj = realm.create_object()
        realm.define_own(obj, "k", ValueDescriptor(1, configurable=False))
        assert realm.delete(obj, "k") is False
        assert realm.has_own(obj, "k")

        obj = strict_realm.create_object()
        strict_realm.define_own(obj, "k", ValueDescriptor(1, configurable=False))
        with pytest.raises(NotConfigurableError):
            strict_realm.delete(obj, "k")

    def test_ancestor_unaffected(self, realm, chain):
        """Deleting on a descendant leaves the ancestor alone."""
        a, b, c = chain
        realm.set(b, "k", "b")
        realm.set(a, "k", "a")
        realm.delete(a, "k")
        assert realm.get(b, "k") == "b"


class TestHas:
    """Test chain-wide membership."""

    def test_own_and_inherited(self, realm, chain):
        """Has sees inherited keys, has_own does not."""
        a, _, c = chain
        realm.set(c, "k", 1)
        assert realm.has(a, "k")
        assert not realm.has_own(a, "k")
        assert not realm.has(a, "other")

    def test_accessor_counts(self, realm, chain):
        """An empty accessor still counts as present."""
        a, b, _ = chain
        realm.define_own(b, "x", AccessorDescriptor())
        assert realm.has(a, "x")


class TestSuper:
    """Test lookups that start above the defining object."""

    def test_super_get(self, realm):
        """A method can call the implementation above its home object."""
        base = realm.create_object()
        derived = realm.create_object(base)
        instance = realm.create_object(derived)
        realm.set(base, "greet", lambda this: "base " + realm.get(this, "name"))
        realm.set(
            derived,
            "greet",
            lambda this: "derived+" + realm.super_get(derived, "greet", this)(this),
        )
        realm.set(instance, "name", "x")
        assert realm.call_method(instance, "greet") == "derived+base x"

    def test_super_follows_relink(self, realm):
        """Relinking the home object is seen by the next super lookup."""
        first = realm.create_object()
        second = realm.create_object()
        realm.set(first, "who", "first")
        realm.set(second, "who", "second")
        home = realm.create_object(first)
        assert realm.super_get(home, "who", home) == "first"
        realm.set_prototype(home, second)
        assert realm.super_get(home, "who", home) == "second"

    def test_super_get_without_prototype(self, realm):
        """Super lookup with no prototype yields undefined."""
        home = realm.create_object()
        assert realm.super_get(home, "x", home) is UNDEFINED

    def test_super_set_invokes_ancestor_setter(self, realm):
        """Super assignment runs an ancestor setter on the receiver."""
        base = realm.create_object()
        home = realm.create_object(base)
        receiver = realm.create_object(home)
        realm.define_own(
            base, "x", AccessorDescriptor(set=lambda this, v: realm.set(this, "_x", v))
        )
        realm.super_set(home, "x", 3, receiver)
        assert realm.get(receiver, "_x") == 3

    def test_super_set_without_prototype(self, realm):
        """Super assignment with no prototype writes to the receiver."""
        home = realm.create_object()
        receiver = realm.create_object(home)
        assert realm.super_set(home, "x", 1, receiver) is True
        assert realm.has_own(receiver, "x")


class TestCallMethod:
    """Test receiver-bound method calls."""

    def test_inherited_method(self, realm):
        """Inherited methods are called with the receiver as this."""
        proto = realm.create_object()
        obj = realm.create_object(proto)
        realm.set(proto, "add", lambda this, n: realm.get(this, "base") + n)
        realm.set(obj, "base", 10)
        assert realm.call_method(obj, "add", 5) == 15

    def test_not_callable(self, realm):
        """Calling a non-function is rejected."""
        obj = realm.create_object()
        realm.set(obj, "x", 1)
        with pytest.raises(ObjectModelTypeError):
            realm.call_method(obj, "x")
        with pytest.raises(ObjectModelTypeError):
            realm.call_method(obj, "missing")
