"""Object model realm: the public entry point."""

import contextlib
import logging
import threading
from typing import Any, Dict, List, Optional

from . import constructors, descriptors, resolver
from .constructors import ConstructorObject, Initializer
from .descriptors import Descriptor
from .objects import ObjectRecord, ObjectStore, is_prototype_of, require_object
from .values import UNDEFINED

logger = logging.getLogger(__name__)


class Realm:
    """An isolated object model with its own store, policy and lock."""

    def __init__(self, strict: bool = False, thread_safe: bool = True):
        """Create a new realm.

        Args:
            strict: Raise on failed writes and deletes instead of silently
                dropping them
            thread_safe: Serialize every operation under a reentrant lock.
                Pass False when the realm is only used from one thread.
        """
        self.strict = strict
        self.thread_safe = thread_safe
        self.store = ObjectStore()
        # Reentrant: getters, setters and initializers call back in
        self._lock = threading.RLock() if thread_safe else contextlib.nullcontext()

    @property
    def epoch(self) -> int:
        """Relink counter; changes whenever any prototype link changes."""
        return self.store.epoch

    # Object creation

    def create_object(self, prototype: Optional[ObjectRecord] = None) -> ObjectRecord:
        with self._lock:
            return self.store.create_object(prototype)

    def create_constructor(
        self,
        name: str = "",
        initializer: Optional[Initializer] = None,
        static_link: Optional[ConstructorObject] = None,
        prototype_parent: Optional[ObjectRecord] = None,
    ) -> ConstructorObject:
        with self._lock:
            return constructors.create_constructor(
                self.store, name, initializer, static_link, prototype_parent
            )

    def extend(
        self, sup: ConstructorObject, name: str = "", initializer: Optional[Initializer] = None
    ) -> ConstructorObject:
        with self._lock:
            return constructors.extend(self.store, sup, name, initializer)

    def invoke(self, constructor: ConstructorObject, *args: Any) -> ObjectRecord:
        with self._lock:
            return constructors.invoke(self.store, constructor, *args)

    # Chain management

    def get_prototype(self, obj: ObjectRecord) -> Optional[ObjectRecord]:
        with self._lock:
            return self.store.get_prototype(obj)

    def set_prototype(self, obj: ObjectRecord, prototype: Optional[ObjectRecord]) -> None:
        with self._lock:
            self.store.set_prototype(obj, prototype)

    def link_static(self, sub: ConstructorObject, sup: Optional[ConstructorObject]) -> None:
        with self._lock:
            constructors.link_static(self.store, sub, sup)

    def link_instance_prototype(self, sub: ConstructorObject, sup: ConstructorObject) -> None:
        with self._lock:
            constructors.link_instance_prototype(self.store, sub, sup)

    def is_prototype_of(self, proto: ObjectRecord, obj: Any) -> bool:
        if not isinstance(obj, ObjectRecord):
            return False
        with self._lock:
            return is_prototype_of(proto, obj)

    def instance_of(self, obj: Any, constructor: ConstructorObject) -> bool:
        with self._lock:
            return constructors.instance_of(obj, constructor)

    # Property access

    def get(self, obj: ObjectRecord, key: Any, receiver: Any = None) -> Any:
        with self._lock:
            return resolver.get_property(obj, key, receiver)

    def set(self, obj: ObjectRecord, key: Any, value: Any, receiver: Any = None) -> bool:
        with self._lock:
            return resolver.set_property(obj, key, value, receiver, strict=self.strict)

    def delete(self, obj: ObjectRecord, key: Any) -> bool:
        with self._lock:
            return resolver.delete_property(obj, key, strict=self.strict)

    def has(self, obj: ObjectRecord, key: Any) -> bool:
        with self._lock:
            return resolver.has_property(obj, key)

    def super_get(self, home: ObjectRecord, key: Any, receiver: Any) -> Any:
        with self._lock:
            return resolver.super_get(home, key, receiver)

    def super_set(self, home: ObjectRecord, key: Any, value: Any, receiver: Any) -> bool:
        with self._lock:
            return resolver.super_set(home, key, value, receiver, strict=self.strict)

    def call_method(self, obj: ObjectRecord, key: Any, *args: Any, receiver: Any = None) -> Any:
        with self._lock:
            return resolver.call_method(obj, key, *args, receiver=receiver)

    # Own properties

    def define_own(self, obj: ObjectRecord, key: Any, descriptor: Descriptor) -> None:
        with self._lock:
            descriptors.define_own(require_object(obj), key, descriptor)

    def delete_own(self, obj: ObjectRecord, key: Any) -> bool:
        with self._lock:
            return descriptors.delete_own(require_object(obj), key)

    def has_own(self, obj: ObjectRecord, key: Any) -> bool:
        with self._lock:
            return descriptors.has_own(require_object(obj), key)

    def read_own(self, obj: ObjectRecord, key: Any) -> Optional[Descriptor]:
        with self._lock:
            return descriptors.read_own(require_object(obj), key)

    def own_keys(self, obj: ObjectRecord) -> List[str]:
        with self._lock:
            return descriptors.own_keys(require_object(obj))

    def enumerable_keys(self, obj: ObjectRecord) -> List[str]:
        with self._lock:
            return descriptors.enumerable_keys(require_object(obj))

    # Integrity

    def prevent_extensions(self, obj: ObjectRecord) -> None:
        with self._lock:
            descriptors.prevent_extensions(require_object(obj))

    def is_extensible(self, obj: ObjectRecord) -> bool:
        with self._lock:
            return descriptors.is_extensible(require_object(obj))

    def freeze(self, obj: ObjectRecord) -> None:
        with self._lock:
            descriptors.freeze(require_object(obj))

    # Conversion

    def to_python(self, value: Any) -> Any:
        """Convert a value to Python, snapshotting records into dicts.

        Only enumerable own properties are included. Getters run against the
        record itself.
        """
        with self._lock:
            return self._to_python(value, {})

    def _to_python(self, value: Any, seen: Dict[int, Any]) -> Any:
        if value is UNDEFINED:
            return None
        if not isinstance(value, ObjectRecord):
            return value
        if id(value) in seen:
            return seen[id(value)]
        result: Dict[str, Any] = {}
        seen[id(value)] = result
        for key in value.descriptors.enumerable_keys():
            result[key] = self._to_python(resolver.get_property(value, key), seen)
        return result

    def from_python(self, value: Any, prototype: Optional[ObjectRecord] = None) -> Any:
        """Convert a Python value, building records from dicts."""
        with self._lock:
            return self._from_python(value, prototype)

    def _from_python(self, value: Any, prototype: Optional[ObjectRecord]) -> Any:
        if isinstance(value, dict):
            obj = self.store.create_object(prototype)
            for k, v in value.items():
                resolver.set_property(obj, k, self._from_python(v, prototype), strict=self.strict)
            return obj
        if value is None:
            return UNDEFINED
        return value

    @property
    def object_count(self) -> int:
        """Number of live records allocated by this realm."""
        return len(self.store)

    def __repr__(self) -> str:
        mode = "strict" if self.strict else "sloppy"
        return f"Realm({mode}, objects={len(self.store)})"
