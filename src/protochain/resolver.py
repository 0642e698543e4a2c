"""Property resolution over prototype chains.

Each access operation walks the chain differently:

- get stops at the first record holding the key. A value is returned from
  wherever it was found; an accessor is called with the original receiver as
  ``this``. An accessor without a getter yields undefined, even if an
  ancestor further up has one.
- set stops at the first record holding the key as well. An accessor's
  setter runs against the receiver; otherwise the write always lands as an
  own property of the receiver, never on an ancestor.
- delete only looks at the object's own table.
- has walks the whole chain.
"""

import logging
from dataclasses import replace
from typing import Any, Optional, Tuple

from .descriptors import AccessorDescriptor, Descriptor, ValueDescriptor, delete_own
from .errors import (
    NotConfigurableError,
    NotExtensibleError,
    ObjectModelError,
    ObjectModelTypeError,
    ReadOnlyError,
)
from .objects import ObjectRecord, iter_chain, require_object
from .values import UNDEFINED, to_property_key

logger = logging.getLogger(__name__)


def find_property(
    obj: ObjectRecord, key: str
) -> Tuple[Optional[ObjectRecord], Optional[Descriptor]]:
    """Return (holder, descriptor) for the nearest record owning key."""
    for holder in iter_chain(obj):
        descriptor = holder.descriptors.lookup(key)
        if descriptor is not None:
            return holder, descriptor
    return None, None


def _reject(strict: bool, error: ObjectModelError) -> bool:
    """Raise error in strict mode, otherwise report a dropped write."""
    if strict:
        raise error
    logger.debug("Write dropped: %s", error.message)
    return False


def get_property(obj: ObjectRecord, key: Any, receiver: Any = None) -> Any:
    """Get a property value, invoking getters against receiver."""
    require_object(obj)
    key_str = to_property_key(key)
    if receiver is None:
        receiver = obj

    _, descriptor = find_property(obj, key_str)
    if descriptor is None:
        return UNDEFINED
    if isinstance(descriptor, ValueDescriptor):
        return descriptor.value
    # First match wins: a setter-only accessor hides inherited getters
    if descriptor.get is None:
        return UNDEFINED
    return descriptor.get(receiver)


def _write_own(receiver: Any, key: str, value: Any, strict: bool) -> bool:
    """Create or overwrite an own value property on receiver."""
    if not isinstance(receiver, ObjectRecord):
        return _reject(strict, ObjectModelTypeError(f"Cannot set property '{key}' of {receiver!r}"))

    own = receiver.descriptors.lookup(key)
    if own is None:
        if not receiver.extensible:
            return _reject(
                strict, NotExtensibleError(f"Cannot add property '{key}', object is not extensible")
            )
        receiver.descriptors.define(key, ValueDescriptor(value))
        return True

    if isinstance(own, AccessorDescriptor) or not own.writable:
        return _reject(strict, ReadOnlyError(f"Cannot assign to read only property '{key}'"))
    receiver.descriptors.define(key, replace(own, value=value))
    return True


def set_property(
    obj: ObjectRecord, key: Any, value: Any, receiver: Any = None, strict: bool = False
) -> bool:
    """Set a property value.

    Returns:
        True if the write took effect, False if it was silently dropped

    Raises:
        ReadOnlyError: In strict mode, when the matched accessor has no setter
            or the receiver's own property is not writable
        NotExtensibleError: In strict mode, when a new key cannot be added
    """
    require_object(obj)
    key_str = to_property_key(key)
    if receiver is None:
        receiver = obj

    _, descriptor = find_property(obj, key_str)
    if isinstance(descriptor, AccessorDescriptor):
        if descriptor.set is None:
            return _reject(
                strict,
                ReadOnlyError(f"Cannot set property '{key_str}' which has only a getter"),
            )
        descriptor.set(receiver, value)
        return True

    # Inherited values never block or receive the write
    return _write_own(receiver, key_str, value, strict)


def delete_property(obj: ObjectRecord, key: Any, strict: bool = False) -> bool:
    """Delete an own property. Never touches the prototype chain."""
    require_object(obj)
    key_str = to_property_key(key)
    own = obj.descriptors.lookup(key_str)
    if strict and own is not None and not own.configurable:
        raise NotConfigurableError(f"Cannot delete property '{key_str}'")
    return delete_own(obj, key_str)


def has_property(obj: ObjectRecord, key: Any) -> bool:
    """Check if obj or any ancestor owns key."""
    require_object(obj)
    _, descriptor = find_property(obj, to_property_key(key))
    return descriptor is not None


def super_get(home: ObjectRecord, key: Any, receiver: Any) -> Any:
    """Look up key starting above home, binding accessors to receiver.

    home's prototype is read at every call, so relinking home is observed.
    """
    require_object(home, "home object")
    proto = home.prototype
    if proto is None:
        to_property_key(key)
        return UNDEFINED
    return get_property(proto, key, receiver)


def super_set(
    home: ObjectRecord, key: Any, value: Any, receiver: Any, strict: bool = False
) -> bool:
    """Assign through the prototype of home, binding setters to receiver."""
    require_object(home, "home object")
    proto = home.prototype
    if proto is None:
        return _write_own(receiver, to_property_key(key), value, strict)
    return set_property(proto, key, value, receiver=receiver, strict=strict)


def call_method(obj: ObjectRecord, key: Any, *args: Any, receiver: Any = None) -> Any:
    """Resolve key on obj and call it as fn(receiver, *args)."""
    if receiver is None:
        receiver = obj
    fn = get_property(obj, key, receiver)
    if not callable(fn):
        raise ObjectModelTypeError(f"'{to_property_key(key)}' is not a function")
    return fn(receiver, *args)
