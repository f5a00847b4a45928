"""
Resourcery Resource Metaclass — declaration collection, inheritance, registration.

Separates the class-construction logic from the Resource base class.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Tuple, Union

from . import inflector
from .attributes import Attribute
from .config import get_config
from .options import Options, ResourceDefinition
from .records import RecordRegistry
from .registry import ResourceRegistry
from .relationships import Relationship

logger = logging.getLogger("resourcery.metaclass")

__all__ = ["ResourceMeta", "RESERVED_RESOURCE_NAMES"]

RESERVED_RESOURCE_NAMES = ("ids", "types", "hrefs", "links")


class ResourceMeta(type):
    """
    Metaclass for resources.

    Handles:
    - Meta class parsing → Options (never inherited)
    - Value copy of the parent definition (attributes, model hints, hooks)
    - Re-registration of inherited relationships against the subclass
    - Collection of Attribute / relationship / callback declarations
    - Type name derivation and registration in ResourceRegistry
    """

    def __new__(
        mcs,
        name: str,
        bases: Tuple[type, ...],
        namespace: Dict[str, Any],
        **kwargs,
    ) -> ResourceMeta:
        meta_class = namespace.pop("Meta", None)

        parents = [b for b in bases if isinstance(b, ResourceMeta)]
        if not parents:
            # The Resource base class itself
            cls = super().__new__(mcs, name, bases, namespace)
            mcs._attach(cls, Options(meta_class), ResourceDefinition())
            cls._type = None
            return cls

        # Relationship declarations are popped; accessors replace them
        declared_relationships = [
            (key, value) for key, value in namespace.items()
            if isinstance(value, Relationship)
        ]
        for key, _ in declared_relationships:
            namespace.pop(key)

        declared_attributes = [
            (key, value) for key, value in namespace.items()
            if isinstance(value, Attribute)
        ]

        declared_callbacks = [
            (key, getattr(value, "__resource_callbacks__"))
            for key, value in namespace.items()
            if hasattr(value, "__resource_callbacks__")
        ]

        cls = super().__new__(mcs, name, bases, namespace, **kwargs)

        parent = parents[0]
        opts = Options(meta_class)
        mcs._attach(cls, opts, parent._definition.derive())

        cls._type = opts.type or mcs._derive_type(name)
        mcs._check_reserved_resource_name(cls)

        for relationship in parent._definition.relationships.values():
            cls._add_relationship(type(relationship), relationship.name, **relationship.options)

        cls.attribute("id", format="id")

        for attr_name, attr in declared_attributes:
            cls._definition.accessors[attr_name] = attr
            cls.attribute(attr_name, **attr.options)

        for rel_name, declaration in declared_relationships:
            cls._add_relationship(type(declaration), rel_name, **declaration.options)

        for method_name, marks in declared_callbacks:
            for kind, position in marks:
                cls._definition.callbacks.add(kind, position, method_name)

        if opts.model_name and opts.add_model_hint:
            cls.model_hint(model=opts.model_name, resource=cls)

        ResourceRegistry.register(cls)
        return cls

    @staticmethod
    def _attach(cls: ResourceMeta, opts: Options, definition: ResourceDefinition) -> None:
        cls._meta = opts
        cls._definition = definition
        cls._attributes = definition.attributes
        cls._relationships = definition.relationships
        cls._model_hints = definition.model_hints

    @staticmethod
    def _derive_type(class_name: str) -> str:
        name = inflector.demodulize(class_name)
        if name.endswith("Resource"):
            name = name[: -len("Resource")]
        return inflector.pluralize(inflector.underscore(name))

    @staticmethod
    def _check_reserved_resource_name(cls: ResourceMeta) -> None:
        if cls._type in RESERVED_RESOURCE_NAMES and get_config().warn_on_reserved_names:
            logger.warning(f"[NAME COLLISION] `{cls.__qualname__}` is a reserved resource name.")

    # ── Lazily resolved class properties ─────────────────────────────

    @property
    def _abstract(cls) -> bool:
        return cls._meta.abstract

    @property
    def _immutable(cls) -> bool:
        return cls._meta.immutable

    @property
    def _model_name(cls) -> str:
        if cls._meta.abstract:
            return ""
        if cls._meta.model_name:
            return cls._meta.model_name
        name = inflector.demodulize(cls.__name__)
        return name[: -len("Resource")] if name.endswith("Resource") else name

    @property
    def _model_class(cls) -> Optional[type]:
        if cls._meta.abstract:
            return None

        cached = cls.__dict__.get("_resolved_model_class")
        if cached is not None:
            return cached

        model = RecordRegistry.get(cls._model_name)
        if model is None:
            logger.warning(
                f"[MODEL NOT FOUND] Model could not be found for {cls.__qualname__}. "
                f"If this a base Resource declare it as abstract."
            )
            return None
        cls._resolved_model_class = model
        return model

    @property
    def _primary_key(cls) -> str:
        if cls._meta.primary_key:
            return cls._meta.primary_key
        model = None if cls._meta.abstract else RecordRegistry.get(cls._model_name)
        return getattr(model, "primary_key", None) or "id"

    @property
    def resource_key_type(cls) -> Union[str, Callable[..., Any]]:
        return cls._meta.key_type or get_config().default_key_type
