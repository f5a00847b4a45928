"""
Resourcery Faults - typed fault signals for the resource engine.

Every failure a caller is expected to render is a ``Fault`` with a stable
code, a domain and structured metadata. Request-scoped faults live in the
RESOURCE domain; resolution problems in REGISTRY; bad settings in CONFIG.
"""

from .core import (
    Fault,
    FaultDomain,
    Severity,
)

from .domains import (
    ResourceFault,
    RecordNotFound,
    InvalidFieldValue,
    HasManyRelationExists,
    RecordLocked,
    ValidationErrors,
    SaveFailed,
    RegistryFault,
    ResourceNotFoundFault,
    ModelNotFoundFault,
    AbstractResourceFault,
    ConfigInvalidFault,
)

__all__ = [
    # Core types
    "Fault",
    "FaultDomain",
    "Severity",

    # Resource faults
    "ResourceFault",
    "RecordNotFound",
    "InvalidFieldValue",
    "HasManyRelationExists",
    "RecordLocked",
    "ValidationErrors",
    "SaveFailed",

    # Registry / config faults
    "RegistryFault",
    "ResourceNotFoundFault",
    "ModelNotFoundFault",
    "AbstractResourceFault",
    "ConfigInvalidFault",
]
