"""Object model error types and exceptions."""


class ObjectModelError(Exception):
    """Base class for all object model errors."""

    def __init__(self, message: str = "", name: str = "Error"):
        self.message = message
        self.name = name
        super().__init__(f"{name}: {message}" if message else name)


class CycleError(ObjectModelError):
    """Prototype link would make the chain cyclic."""

    def __init__(self, message: str = "Cyclic prototype chain"):
        super().__init__(message, "CycleError")


class NotConfigurableError(ObjectModelError):
    """Incompatible change to a non-configurable property."""

    def __init__(self, message: str = ""):
        super().__init__(message, "NotConfigurableError")


class ReadOnlyError(ObjectModelError):
    """Write to a property that cannot be written (strict mode only)."""

    def __init__(self, message: str = ""):
        super().__init__(message, "ReadOnlyError")


class NotExtensibleError(ObjectModelError):
    """Attempt to add a key to, or relink, a non-extensible object."""

    def __init__(self, message: str = ""):
        super().__init__(message, "NotExtensibleError")


class ObjectModelTypeError(ObjectModelError):
    """Wrong kind of argument (bad key, non-object, non-constructor)."""

    def __init__(self, message: str = ""):
        super().__init__(message, "TypeError")
