"""Object records and the store that allocates and relinks them."""

import logging
import weakref
from typing import Iterator, Optional

from .descriptors import DescriptorTable
from .errors import CycleError, NotExtensibleError, ObjectModelTypeError

logger = logging.getLogger(__name__)


class ObjectRecord:
    """An object: a prototype link plus its own descriptor table."""

    def __init__(self, prototype: Optional["ObjectRecord"] = None):
        self.descriptors = DescriptorTable()
        self._prototype = prototype

    @property
    def prototype(self) -> Optional["ObjectRecord"]:
        return self._prototype

    @property
    def extensible(self) -> bool:
        return self.descriptors.extensible

    def __repr__(self) -> str:
        return f"ObjectRecord({self.descriptors.keys()})"


def require_object(value, what: str = "value") -> ObjectRecord:
    """Return value if it is an object record, else raise."""
    if not isinstance(value, ObjectRecord):
        raise ObjectModelTypeError(f"{what} is not an object: {value!r}")
    return value


def _require_prototype(prototype) -> Optional[ObjectRecord]:
    if prototype is not None and not isinstance(prototype, ObjectRecord):
        raise ObjectModelTypeError(f"Object prototype may only be an object or None: {prototype!r}")
    return prototype


def iter_chain(obj: ObjectRecord) -> Iterator[ObjectRecord]:
    """Yield obj and then each of its ancestors, nearest first."""
    current = obj
    while current is not None:
        yield current
        current = current._prototype


def is_prototype_of(proto: ObjectRecord, obj: ObjectRecord) -> bool:
    """Check if proto appears on obj's chain (excluding obj itself)."""
    current = obj._prototype
    while current is not None:
        if current is proto:
            return True
        current = current._prototype
    return False


class ObjectStore:
    """Allocates object records and owns every prototype relink."""

    def __init__(self):
        self._live = weakref.WeakSet()
        # Bumped on every successful relink; cached lookup paths older than
        # the current epoch may be stale.
        self.epoch = 0

    def __len__(self) -> int:
        return len(self._live)

    def track(self, obj: ObjectRecord) -> ObjectRecord:
        self._live.add(obj)
        return obj

    def create_object(self, prototype: Optional[ObjectRecord] = None) -> ObjectRecord:
        """Allocate an empty record linked to prototype."""
        return self.track(ObjectRecord(_require_prototype(prototype)))

    def get_prototype(self, obj: ObjectRecord) -> Optional[ObjectRecord]:
        return obj._prototype

    def set_prototype(self, obj: ObjectRecord, new_prototype: Optional[ObjectRecord]) -> None:
        """Relink obj to new_prototype.

        Raises:
            CycleError: If new_prototype is obj or already inherits from obj
            NotExtensibleError: If obj is frozen/non-extensible and the link
                would change
        """
        require_object(obj)
        _require_prototype(new_prototype)
        if new_prototype is obj._prototype:
            return
        if not obj.extensible:
            raise NotExtensibleError("Cannot change prototype of a non-extensible object")
        if new_prototype is not None:
            for ancestor in iter_chain(new_prototype):
                if ancestor is obj:
                    logger.debug("Rejected cyclic relink of %r", obj)
                    raise CycleError()
        obj._prototype = new_prototype
        self.epoch += 1
        logger.debug("Relinked %r to %r (epoch %d)", obj, new_prototype, self.epoch)
