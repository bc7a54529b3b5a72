"""Expose @managed attributes and operations of live objects to management clients."""

from .descriptors import AttributeDescriptor, OperationDescriptor, build_descriptors
from .errors import (
    AttributeNotFound,
    ExportError,
    InconsistentDeclaration,
    InstanceAlreadyExists,
    InstanceNotFound,
    InvalidValue,
    InvocationFailure,
    MalformedMarker,
    ManagementError,
    OperationNotFound,
)
from .exporter import ExportedObject, Exporter
from .markers import Managed, managed
from .models import AttributeInfo, ExporterSettings, OperationInfo, coerce_settings
from .resolver import MarkerResolver
from .scanner import ManageableMethod, scan

__all__ = [
    "AttributeDescriptor",
    "AttributeInfo",
    "AttributeNotFound",
    "ExportError",
    "ExportedObject",
    "Exporter",
    "ExporterSettings",
    "InconsistentDeclaration",
    "InstanceAlreadyExists",
    "InstanceNotFound",
    "InvalidValue",
    "InvocationFailure",
    "MalformedMarker",
    "ManageableMethod",
    "Managed",
    "ManagementError",
    "MarkerResolver",
    "OperationDescriptor",
    "OperationInfo",
    "OperationNotFound",
    "build_descriptors",
    "coerce_settings",
    "managed",
    "scan",
]
