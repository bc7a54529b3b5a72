"""Exceptions raised while exporting objects and serving management requests."""

import logging

logger = logging.getLogger(__name__)


class ManagementError(Exception):
    """Base class for errors raised by the management layer itself."""

    def __init__(self, message="A management error occurred", log=False):
        self.message = message
        super().__init__(self.message)
        if log:
            logger.error(message)


# --- request time -----------------------------------------------------------

class AttributeNotFound(ManagementError):
    """Unknown attribute, or the attribute lacks the requested direction."""


class InvalidValue(ManagementError):
    """Value is not assignment-compatible with the attribute type."""


class OperationNotFound(ManagementError):
    """No operation matches the requested name and signature."""


class InstanceNotFound(ManagementError):
    """No object is exported under the name, or it has been collected."""


# --- export time ------------------------------------------------------------

class ExportError(ManagementError):
    """The object could not be exported."""


class InstanceAlreadyExists(ExportError):
    """Another object is already exported under the name."""


class MalformedMarker(ExportError):
    """A @managed method has a shape that cannot be exposed."""


class InconsistentDeclaration(ExportError):
    """Accessors for one attribute disagree on the value type."""

    def __init__(self, attribute: str, message: str, log=False):
        self.attribute = attribute
        super().__init__(message, log=log)


# --- underlying object ------------------------------------------------------

class InvocationFailure(Exception):
    """The exported object's own method raised.

    Not a ManagementError subclass. The original exception is kept as
    ``cause`` and is raised as ``__cause__``.
    """

    def __init__(self, member: str, cause: BaseException):
        self.member = member
        self.cause = cause
        self.message = f"{member} raised {type(cause).__name__}: {cause}"
        super().__init__(self.message)
