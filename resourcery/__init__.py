"""
Resourcery — declarative resources over backing records.

Expose records as typed API resources with attributes, to-one/to-many
relationships, lifecycle hooks and field-level mutation.

Usage:
    from resourcery import Resource, Attribute, ToOne, ToMany, before

    class PostResource(Resource):
        title = Attribute()
        author = ToOne(class_name="Person")
        tags = ToMany(acts_as_set=True)

        @before("save")
        def stamp(self):
            ...

Public API:
    - Resource, ChangeResult: resource base class and change outcomes
    - Attribute, ToOne, ToMany: declarations
    - before, after, around: hook decorators
    - RecordRegistry, register_record: backing record class lookup
    - ResourceRegistry: resource class lookup
    - configure, get_config, ConfigLoader, ResourceConfig: settings
    - Faults: RecordNotFound, InvalidFieldValue, ValidationErrors, ...
"""

__version__ = "0.1.0"

from .attributes import Attribute
from .callbacks import CALLBACK_KINDS, after, around, before
from .config import ConfigLoader, ResourceConfig, configure, get_config
from .faults import (
    AbstractResourceFault,
    ConfigInvalidFault,
    Fault,
    FaultDomain,
    HasManyRelationExists,
    InvalidFieldValue,
    ModelNotFoundFault,
    RecordLocked,
    RecordNotFound,
    RegistryFault,
    ResourceFault,
    ResourceNotFoundFault,
    SaveFailed,
    Severity,
    ValidationErrors,
)
from .keys import KeyVerifier
from .records import RecordRegistry, StaleRecordError, register_record
from .registry import ResourceRegistry
from .relationships import Relationship, ToMany, ToOne
from .resource import ChangeResult, Resource

__all__ = [
    "__version__",
    # Resources
    "Resource",
    "ChangeResult",
    "Attribute",
    "Relationship",
    "ToOne",
    "ToMany",
    # Hooks
    "CALLBACK_KINDS",
    "before",
    "after",
    "around",
    # Keys
    "KeyVerifier",
    # Registries
    "RecordRegistry",
    "register_record",
    "StaleRecordError",
    "ResourceRegistry",
    # Config
    "ConfigLoader",
    "ResourceConfig",
    "configure",
    "get_config",
    # Faults
    "Fault",
    "FaultDomain",
    "Severity",
    "ResourceFault",
    "RecordNotFound",
    "InvalidFieldValue",
    "HasManyRelationExists",
    "RecordLocked",
    "ValidationErrors",
    "SaveFailed",
    "RegistryFault",
    "ResourceNotFoundFault",
    "ModelNotFoundFault",
    "AbstractResourceFault",
    "ConfigInvalidFault",
]
