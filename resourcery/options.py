"""
Resourcery Options — per-type definition and inner ``Meta`` parsing.

``Options`` holds settings read from a resource's own ``Meta`` class; they
are not inherited. ``ResourceDefinition`` holds the registries that are
inherited, and every subclass receives a value copy of its parent's.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Union, TYPE_CHECKING

from .callbacks import CallbackRegistry

if TYPE_CHECKING:
    from .relationships import Relationship


__all__ = ["Options", "ResourceDefinition"]


class Options:
    """
    Parsed resource options from inner Meta class.

    Attributes:
        abstract: No backing record class; cannot wrap records
        immutable: Mutation endpoints should refuse this type
        type: Explicit type name (default derives from the class name)
        model_name: Backing record class name
        add_model_hint: Register ``model_name`` in the model hint table
        primary_key: Record attribute holding the identity
        key_type: ``"integer"``, ``"string"``, ``"uuid"`` or a verifier callable
        namespace: Module path for resource lookup (``"api/v2"``)
    """

    __slots__ = (
        "abstract",
        "immutable",
        "type",
        "model_name",
        "add_model_hint",
        "primary_key",
        "key_type",
        "namespace",
    )

    def __init__(self, meta: Optional[type] = None):
        self.abstract: bool = getattr(meta, "abstract", False) if meta else False
        self.immutable: bool = getattr(meta, "immutable", False) if meta else False
        self.type: Optional[str] = getattr(meta, "type", None) if meta else None
        self.model_name: Optional[str] = getattr(meta, "model_name", None) if meta else None
        self.add_model_hint: bool = getattr(meta, "add_model_hint", True) if meta else True
        self.primary_key: Optional[str] = getattr(meta, "primary_key", None) if meta else None
        self.key_type: Optional[Union[str, Callable[..., Any]]] = (
            getattr(meta, "key_type", None) if meta else None
        )
        self.namespace: str = (getattr(meta, "namespace", "") if meta else "").strip("/")

    def __repr__(self) -> str:
        return f"<Options: abstract={self.abstract} model_name={self.model_name!r}>"


class ResourceDefinition:
    """
    Inheritable registries of one resource type.

    Attributes:
        attributes: name → options
        relationships: name → Relationship (owned by this type)
        model_hints: underscored record class name → resource type name
        accessors: name → generated accessor (the dispatch table)
        callbacks: change kind → hook chain
    """

    def __init__(self):
        self.attributes: Dict[str, Dict[str, Any]] = {}
        self.relationships: Dict[str, Relationship] = {}
        self.model_hints: Dict[str, str] = {}
        self.accessors: Dict[str, Any] = {}
        self.callbacks = CallbackRegistry()

    def derive(self) -> ResourceDefinition:
        """
        Value copy for a subclass.

        Relationships are left empty; the metaclass re-registers each one
        with ``parent_resource`` rebound to the subclass.
        """
        child = ResourceDefinition()
        child.attributes = {name: dict(opts) for name, opts in self.attributes.items()}
        child.model_hints = dict(self.model_hints)
        child.accessors = dict(self.accessors)
        child.callbacks = self.callbacks.copy()
        return child

    def __repr__(self) -> str:
        return (
            f"<ResourceDefinition attributes={list(self.attributes)} "
            f"relationships={list(self.relationships)}>"
        )
