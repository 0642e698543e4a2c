"""Property descriptors and the per-object descriptor table."""

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Iterator, List, Optional, Union, TYPE_CHECKING

from .values import UNDEFINED, same_value, to_property_key
from .errors import NotConfigurableError, NotExtensibleError, ObjectModelTypeError

if TYPE_CHECKING:
    from .objects import ObjectRecord

logger = logging.getLogger(__name__)


Getter = Callable[[Any], Any]
Setter = Callable[[Any, Any], Any]


@dataclass(frozen=True)
class ValueDescriptor:
    """A property holding a stored value."""

    value: Any = UNDEFINED
    writable: bool = True
    enumerable: bool = True
    configurable: bool = True


@dataclass(frozen=True)
class AccessorDescriptor:
    """A property backed by getter/setter functions.

    get is called as get(this), set as set(this, value). Either may be None.
    """

    get: Optional[Getter] = None
    set: Optional[Setter] = None
    enumerable: bool = True
    configurable: bool = True


Descriptor = Union[ValueDescriptor, AccessorDescriptor]


def _check_compatible(key: str, current: Descriptor, new: Descriptor) -> None:
    """Reject an incompatible redefinition of a non-configurable property."""
    if current.configurable:
        return
    if new.configurable:
        raise NotConfigurableError(f"Cannot make '{key}' configurable")
    if new.enumerable != current.enumerable:
        raise NotConfigurableError(f"Cannot change enumerability of '{key}'")
    if type(new) is not type(current):
        raise NotConfigurableError(f"Cannot change kind of property '{key}'")
    if isinstance(current, ValueDescriptor):
        if not current.writable:
            if new.writable:
                raise NotConfigurableError(f"Cannot make '{key}' writable")
            if not same_value(new.value, current.value):
                raise NotConfigurableError(f"Cannot redefine read-only '{key}'")
    else:
        if new.get is not current.get or new.set is not current.set:
            raise NotConfigurableError(f"Cannot redefine accessor '{key}'")


class DescriptorTable:
    """Key to descriptor mapping owned by exactly one object record."""

    def __init__(self):
        self._descriptors: Dict[str, Descriptor] = {}
        self.extensible = True

    def __contains__(self, key: str) -> bool:
        return key in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._descriptors))

    def lookup(self, key: str) -> Optional[Descriptor]:
        return self._descriptors.get(key)

    def define(self, key: str, descriptor: Descriptor) -> None:
        """Install or replace the descriptor for key."""
        if not isinstance(descriptor, (ValueDescriptor, AccessorDescriptor)):
            raise ObjectModelTypeError(f"Not a property descriptor: {descriptor!r}")
        current = self._descriptors.get(key)
        if current is None:
            if not self.extensible:
                raise NotExtensibleError(f"Cannot add property '{key}', object is not extensible")
        else:
            _check_compatible(key, current, descriptor)
        # Replacing keeps the key's original insertion position
        self._descriptors[key] = descriptor

    def remove(self, key: str) -> bool:
        """Remove key if present and configurable."""
        current = self._descriptors.get(key)
        if current is None or not current.configurable:
            return False
        del self._descriptors[key]
        return True

    def keys(self) -> List[str]:
        return list(self._descriptors.keys())

    def enumerable_keys(self) -> List[str]:
        return [k for k, d in self._descriptors.items() if d.enumerable]

    def freeze(self) -> None:
        """Make every property non-configurable and values read-only."""
        for key, descriptor in self._descriptors.items():
            if isinstance(descriptor, ValueDescriptor):
                self._descriptors[key] = replace(descriptor, writable=False, configurable=False)
            else:
                self._descriptors[key] = replace(descriptor, configurable=False)
        self.extensible = False

    def __repr__(self) -> str:
        return f"DescriptorTable({self._descriptors})"


def define_own(obj: "ObjectRecord", key: Any, descriptor: Descriptor) -> None:
    """Install a descriptor on obj only, never touching its prototypes."""
    key_str = to_property_key(key)
    obj.descriptors.define(key_str, descriptor)
    logger.debug("define_own %r.%s -> %r", obj, key_str, descriptor)


def delete_own(obj: "ObjectRecord", key: Any) -> bool:
    """Remove the own descriptor for key if it exists and is configurable.

    Never touches the prototype chain. A key that is only inherited is left
    alone and reports True; a key missing everywhere reports False.
    """
    key_str = to_property_key(key)
    if key_str in obj.descriptors:
        return obj.descriptors.remove(key_str)
    ancestor = obj.prototype
    while ancestor is not None:
        if key_str in ancestor.descriptors:
            return True
        ancestor = ancestor.prototype
    return False


def has_own(obj: "ObjectRecord", key: Any) -> bool:
    return to_property_key(key) in obj.descriptors


def read_own(obj: "ObjectRecord", key: Any) -> Optional[Descriptor]:
    """Return the own descriptor for key, or None."""
    return obj.descriptors.lookup(to_property_key(key))


def own_keys(obj: "ObjectRecord") -> List[str]:
    """Own keys in insertion order."""
    return obj.descriptors.keys()


def enumerable_keys(obj: "ObjectRecord") -> List[str]:
    """Own enumerable keys in insertion order."""
    return obj.descriptors.enumerable_keys()


def prevent_extensions(obj: "ObjectRecord") -> None:
    obj.descriptors.extensible = False


def is_extensible(obj: "ObjectRecord") -> bool:
    return obj.descriptors.extensible


def freeze(obj: "ObjectRecord") -> None:
    obj.descriptors.freeze()
