"""
protochain - A Prototype-Chain Object Model

An embeddable object layer reproducing prototype-based property resolution:
prototype links, value and accessor descriptors, and constructor-based
instantiation, implemented entirely in Python with no external dependencies.
"""

__version__ = "0.1.0"

from .realm import Realm
from .objects import ObjectRecord, ObjectStore
from .constructors import ConstructorObject
from .descriptors import AccessorDescriptor, Descriptor, ValueDescriptor
from .errors import (
    CycleError,
    NotConfigurableError,
    NotExtensibleError,
    ObjectModelError,
    ObjectModelTypeError,
    ReadOnlyError,
)
from .values import UNDEFINED, Undefined

__all__ = [
    "Realm",
    "ObjectRecord",
    "ObjectStore",
    "ConstructorObject",
    "AccessorDescriptor",
    "Descriptor",
    "ValueDescriptor",
    "CycleError",
    "NotConfigurableError",
    "NotExtensibleError",
    "ObjectModelError",
    "ObjectModelTypeError",
    "ReadOnlyError",
    "UNDEFINED",
    "Undefined",
]
