"""Constructor objects and two-phase (allocate, then initialize) instantiation."""

import logging
from typing import Any, Callable, Optional

from .descriptors import ValueDescriptor
from .errors import ObjectModelTypeError
from .objects import ObjectRecord, ObjectStore, is_prototype_of

logger = logging.getLogger(__name__)


Initializer = Callable[..., Any]


class ConstructorObject(ObjectRecord):
    """An object that can be invoked to create linked instances.

    Its own prototype link doubles as the static link, so lookups made
    directly on a constructor fall through to its parent constructor.

    Build these with create_constructor (or Realm.create_constructor), which
    registers the constructor with a store and installs its "prototype",
    "name" and "constructor" properties. A bare instance has none of them,
    so invoking it yields objects with no prototype.
    """

    def __init__(
        self,
        name: str = "",
        initializer: Optional[Initializer] = None,
        static_link: Optional["ConstructorObject"] = None,
    ):
        super().__init__(static_link)
        self.name = name
        self.initializer = initializer

    @property
    def static_link(self) -> Optional["ConstructorObject"]:
        return self.prototype

    @property
    def construction_prototype(self) -> Optional[ObjectRecord]:
        """The record new instances are linked to (own "prototype" property)."""
        descriptor = self.descriptors.lookup("prototype")
        if isinstance(descriptor, ValueDescriptor) and isinstance(descriptor.value, ObjectRecord):
            return descriptor.value
        return None

    def initialize(self, this: ObjectRecord, *args: Any) -> None:
        """Run this constructor's initializer against an existing object.

        Subclass initializers call this on their parent to chain setup.
        """
        if self.initializer is not None:
            self.initializer(this, *args)

    def __repr__(self) -> str:
        return f"[Function: {self.name}]" if self.name else "[Function (anonymous)]"


def _require_constructor(value: Any) -> ConstructorObject:
    if not isinstance(value, ConstructorObject):
        raise ObjectModelTypeError(f"{value!r} is not a constructor")
    return value


def create_constructor(
    store: ObjectStore,
    name: str = "",
    initializer: Optional[Initializer] = None,
    static_link: Optional[ConstructorObject] = None,
    prototype_parent: Optional[ObjectRecord] = None,
) -> ConstructorObject:
    """Create a constructor together with its construction prototype.

    Args:
        store: Store that allocates the constructor and its prototype
        name: Constructor name, exposed as the own "name" property
        initializer: Called as initializer(this, *args) on each new instance
        static_link: Parent constructor for static lookups
        prototype_parent: Prototype of the new construction prototype
    """
    if static_link is not None:
        _require_constructor(static_link)
    constructor = store.track(ConstructorObject(name, initializer, static_link))
    prototype = store.create_object(prototype_parent)

    # In JavaScript, every function has a prototype property whose
    # constructor points back at the function
    prototype.descriptors.define(
        "constructor", ValueDescriptor(constructor, writable=True, enumerable=False, configurable=True)
    )
    constructor.descriptors.define(
        "prototype", ValueDescriptor(prototype, writable=True, enumerable=False, configurable=False)
    )
    constructor.descriptors.define(
        "name", ValueDescriptor(name, writable=False, enumerable=False, configurable=True)
    )
    logger.debug("Created constructor %r", constructor)
    return constructor


def invoke(store: ObjectStore, constructor: Any, *args: Any) -> ObjectRecord:
    """Allocate an instance linked to the construction prototype, then initialize it.

    Superclass initializers are not chained automatically.
    """
    constructor = _require_constructor(constructor)
    obj = store.create_object(constructor.construction_prototype)
    constructor.initialize(obj, *args)
    logger.debug("Invoked %r", constructor)
    return obj


def link_static(store: ObjectStore, sub: ConstructorObject, sup: Optional[ConstructorObject]) -> None:
    """Make static lookups on sub fall through to sup."""
    _require_constructor(sub)
    if sup is not None:
        _require_constructor(sup)
    store.set_prototype(sub, sup)


def link_instance_prototype(store: ObjectStore, sub: ConstructorObject, sup: ConstructorObject) -> None:
    """Link sub's construction prototype to sup's construction prototype."""
    sub_proto = _require_constructor(sub).construction_prototype
    if sub_proto is None:
        raise ObjectModelTypeError(f"{sub!r} has no object prototype")
    store.set_prototype(sub_proto, _require_constructor(sup).construction_prototype)


def extend(
    store: ObjectStore,
    sup: ConstructorObject,
    name: str = "",
    initializer: Optional[Initializer] = None,
) -> ConstructorObject:
    """Create a subclass constructor linked to sup on both chains."""
    _require_constructor(sup)
    return create_constructor(
        store,
        name,
        initializer,
        static_link=sup,
        prototype_parent=sup.construction_prototype,
    )


def instance_of(obj: Any, constructor: Any) -> bool:
    """Check if constructor's construction prototype is on obj's chain."""
    constructor = _require_constructor(constructor)
    if not isinstance(obj, ObjectRecord):
        return False
    proto = constructor.construction_prototype
    if proto is None:
        raise ObjectModelTypeError(f"{constructor!r} has non-object prototype in instanceof check")
    return is_prototype_of(proto, obj)
