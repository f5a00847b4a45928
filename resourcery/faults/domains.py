"""
Resourcery Faults - Domain-specific fault types.

Provides concrete fault classes for each domain:
- RESOURCE faults (request-scoped, rendered by the request layer)
- REGISTRY faults (resource/model resolution)
- CONFIG faults
"""

from __future__ import annotations

from typing import Any, Optional, TYPE_CHECKING

from .core import Fault, FaultDomain, Severity

if TYPE_CHECKING:
    from ..resource import Resource


# ============================================================================
# RESOURCE Faults
# ============================================================================

class ResourceFault(Fault):
    """Base class for request-scoped resource faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.WARN,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.RESOURCE,
            severity=severity,
            retryable=False,
            public=True,
            metadata=metadata,
        )


class RecordNotFound(ResourceFault):
    """Lookup by key yielded nothing."""

    def __init__(self, id: Any, **kwargs):
        self.id = id
        super().__init__(
            code="RECORD_NOT_FOUND",
            message=f"The record identified by {id} could not be found.",
            metadata={"id": id, **kwargs.get("metadata", {})},
        )


class InvalidFieldValue(ResourceFault):
    """A key or attribute value failed type/format constraints."""

    def __init__(self, field: str, value: Any, **kwargs):
        self.field = field
        self.value = value
        super().__init__(
            code="INVALID_FIELD_VALUE",
            message=f"{value} is not a valid value for {field}.",
            metadata={"field": field, "value": value, **kwargs.get("metadata", {})},
        )


class HasManyRelationExists(ResourceFault):
    """A to-many link was created twice."""

    def __init__(self, id: Any, **kwargs):
        self.id = id
        super().__init__(
            code="RELATION_EXISTS",
            message=f"The relation to {id} already exists.",
            metadata={"id": id, **kwargs.get("metadata", {})},
        )


class RecordLocked(ResourceFault):
    """Concurrent modification conflict reported by the record store."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            code="RECORD_LOCKED",
            message=message,
            metadata=kwargs.get("metadata"),
        )


class ValidationErrors(ResourceFault):
    """
    The backing record failed validation or the store reported field errors.

    Attributes:
        error_messages: ``{field: [messages]}`` taken from the record
        resource_relationships: relationship names of the resource type,
            so a renderer can point errors at relationships
    """

    def __init__(self, resource: Resource, **kwargs):
        self.error_messages = {
            field: list(messages)
            for field, messages in resource.model_error_messages().items()
        }
        self.resource_relationships = list(type(resource)._relationships.keys())
        super().__init__(
            code="VALIDATION_ERRORS",
            message="Validation Error(s)",
            metadata={"errors": self.error_messages, **kwargs.get("metadata", {})},
        )

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.error_messages
        return base


class SaveFailed(ResourceFault):
    """The store refused to save without giving a reason."""

    def __init__(self, **kwargs):
        super().__init__(
            code="SAVE_FAILED",
            message="Save failed or was cancelled",
            severity=Severity.ERROR,
            metadata=kwargs.get("metadata"),
        )


# ============================================================================
# REGISTRY Faults
# ============================================================================

class RegistryFault(Fault):
    """Base class for resource/model resolution faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.FATAL,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.REGISTRY,
            severity=severity,
            retryable=False,
            public=False,
            metadata=metadata,
        )


class ResourceNotFoundFault(RegistryFault):
    """No resource class is registered for a type name."""

    def __init__(self, type_name: str, lookup: str, **kwargs):
        super().__init__(
            code="RESOURCE_NOT_FOUND",
            message=f"Could not find resource '{type_name}'. ({lookup} not registered)",
            metadata={"type": type_name, "lookup": lookup, **kwargs.get("metadata", {})},
        )


class ModelNotFoundFault(RegistryFault):
    """A resource needs its backing record class and none is registered."""

    def __init__(self, resource_name: str, model_name: str, **kwargs):
        super().__init__(
            code="MODEL_NOT_FOUND",
            message=f"Model '{model_name}' could not be found for {resource_name}",
            metadata={"resource": resource_name, "model": model_name, **kwargs.get("metadata", {})},
        )


class AbstractResourceFault(RegistryFault):
    """An abstract resource was instantiated."""

    def __init__(self, resource_name: str, **kwargs):
        super().__init__(
            code="ABSTRACT_RESOURCE",
            message=f"{resource_name} is abstract and cannot wrap a record",
            metadata={"resource": resource_name, **kwargs.get("metadata", {})},
        )


# ============================================================================
# CONFIG Faults
# ============================================================================

class ConfigInvalidFault(Fault):
    """Configuration value is invalid."""

    def __init__(self, key: str, reason: str, **kwargs):
        super().__init__(
            code="CONFIG_INVALID",
            message=f"Configuration key '{key}' is invalid: {reason}",
            domain=FaultDomain.CONFIG,
            metadata={"key": key, "reason": reason, **kwargs.get("metadata", {})},
        )
