"""
Resourcery Resource — the API-facing wrapper around one backing record.

A resource class declares attributes, relationships and hooks; an instance
binds that definition to one record and one request context.

Usage:
    class PostResource(Resource):
        title = Attribute()
        body = Attribute()

        author = ToOne(class_name="Person")
        tags = ToMany(acts_as_set=True)

        @before("save")
        def normalize_title(self):
            self.model.title = self.model.title.strip()

    post = PostResource.find_by_key("12", context={"current_user": user})
    post.replace_fields({
        "attributes": {"title": "Hello"},
        "to_one": {"author": 3},
        "to_many": {"tags": [1, 2]},
    })

Every mutation runs inside ``change()``: the outermost call wraps the work
in ``create``/``update`` hooks and saves once at the end; mutations nested
inside it only run their own hooks and mark the record as needing a save.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Type, Union

from . import inflector
from .attributes import Attribute, DEFAULT_ATTRIBUTE_OPTIONS
from .callbacks import POSITIONS, Hook
from .config import get_config
from .faults import (
    AbstractResourceFault,
    HasManyRelationExists,
    InvalidFieldValue,
    ModelNotFoundFault,
    RecordLocked,
    RecordNotFound,
    ResourceNotFoundFault,
    SaveFailed,
    ValidationErrors,
)
from .keys import KeyVerifier
from .metaclass import ResourceMeta
from .records import StaleRecordError
from .registry import ResourceRegistry
from .relationships import Relationship, ToMany, ToOne, build_accessors

logger = logging.getLogger("resourcery.resource")

__all__ = ["Resource", "ChangeResult"]

RESERVED_ATTRIBUTE_NAMES = ("type",)
RESERVED_RELATIONSHIP_NAMES = ("id", "ids", "type", "types")


class ChangeResult(str, Enum):
    """Outcome of a change: fully applied, or handed off for later."""
    COMPLETED = "completed"
    ACCEPTED = "accepted"


class Resource(metaclass=ResourceMeta):
    """
    Base resource.

    Class attributes (set by the metaclass):
        _type: Pluralized type name
        _attributes: attribute name → options
        _relationships: relationship name → Relationship
        _model_hints: record class name → resource type
        _definition: the full ResourceDefinition
        _meta: Options parsed from ``Meta``
    """

    class Meta:
        abstract = True

    def __init__(self, model: Any, context: Any = None):
        if type(self)._abstract:
            raise AbstractResourceFault(type(self).__qualname__)
        self._model = model
        self._context = context
        self._change_depth = 0
        self.save_needed = False

    @property
    def model(self) -> Any:
        return self._model

    @property
    def context(self) -> Any:
        return self._context

    @property
    def id(self) -> Any:
        return getattr(self._model, type(self)._primary_key)

    @id.setter
    def id(self, value: Any) -> None:
        setattr(self._model, type(self)._primary_key, value)

    @property
    def changing(self) -> bool:
        return self._change_depth > 0

    def is_new(self) -> bool:
        return self.id is None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r}>"

    # ========================================================================
    # Change / save state machine
    # ========================================================================

    def _run_callbacks(self, kind: str, operation: Callable[[], Any]) -> bool:
        return type(self)._definition.callbacks.run(kind, self, operation)

    def change(self, kind: str, operation: Callable[[], Any]) -> ChangeResult:
        """
        Run ``operation`` as a change of ``kind``.

        The outermost change on an instance runs inside the ``create`` or
        ``update`` hooks and saves once if anything marked the record dirty
        (or the record is new). Nested changes only run their own hooks.
        """
        completed = False

        def run_operation() -> None:
            nonlocal completed
            completed = operation() == ChangeResult.COMPLETED

        if self._change_depth:
            self._change_depth += 1
            try:
                self._run_callbacks(kind, run_operation)
            finally:
                self._change_depth -= 1
            return ChangeResult.COMPLETED if completed else ChangeResult.ACCEPTED

        def run_change() -> None:
            nonlocal completed
            self._change_depth += 1
            try:
                self._run_callbacks(kind, run_operation)
                if self.save_needed or self.is_new():
                    saved = self.save() == ChangeResult.COMPLETED
                    completed = completed and saved
            finally:
                self._change_depth -= 1

        self._run_callbacks("create" if self.is_new() else "update", run_change)
        return ChangeResult.COMPLETED if completed else ChangeResult.ACCEPTED

    def save(self) -> ChangeResult:
        result = ChangeResult.ACCEPTED

        def run() -> None:
            nonlocal result
            result = self._save()

        self._run_callbacks("save", run)
        return result

    def remove(self) -> ChangeResult:
        result = ChangeResult.ACCEPTED

        def run() -> None:
            nonlocal result
            result = self._remove()

        self._run_callbacks("remove", run)
        return result

    def model_error_messages(self) -> Mapping[str, List[str]]:
        return self._model.errors

    def _save(self) -> ChangeResult:
        """
        Validate and persist the record.

        Override to return ``ChangeResult.ACCEPTED`` when the store only
        queues the write; every operation that triggered the save then
        reports ``ACCEPTED`` too.
        """
        model = self._model

        if not model.is_valid():
            raise ValidationErrors(self)

        # Read-only stores may hand out records without ``save``
        save = getattr(model, "save", None)
        if save is None:
            saved = True
        else:
            try:
                saved = save(validate=False)
            except StaleRecordError as exc:
                raise RecordLocked(str(exc) or f"{type(self).__name__} {self.id} was modified concurrently") from exc

            if not saved:
                if model.errors:
                    raise ValidationErrors(self)
                raise SaveFailed()

        self.save_needed = not saved
        logger.debug(f"Saved {type(self).__name__} {self.id!r}")
        return ChangeResult.COMPLETED

    def _remove(self) -> ChangeResult:
        if not self._model.destroy():
            raise ValidationErrors(self)
        logger.debug(f"Removed {type(self).__name__} {self.id!r}")
        return ChangeResult.COMPLETED

    # ========================================================================
    # Field replacement
    # ========================================================================

    def replace_fields(self, field_data: Mapping[str, Any]) -> ChangeResult:
        return self.change("replace_fields", lambda: self._replace_fields(field_data))

    def fetchable_fields(self) -> List[str]:
        """Override on a resource to filter the fetchable keys."""
        return type(self).fields()

    def _replace_fields(self, field_data: Mapping[str, Any]) -> ChangeResult:
        attributes = type(self)._attributes

        for attribute, value in (field_data.get("attributes") or {}).items():
            if attribute not in attributes:
                raise AttributeError(f"{type(self).__name__} has no attribute '{attribute}'")
            try:
                setattr(self, attribute, value)
            except ValueError as exc:
                raise InvalidFieldValue(attribute, value) from exc
            self.save_needed = True

        for relationship_type, value in (field_data.get("to_one") or {}).items():
            if value is None:
                self.remove_to_one_link(relationship_type)
            elif isinstance(value, Mapping):
                self.replace_polymorphic_to_one_link(relationship_type, value["id"], value["type"])
            else:
                self.replace_to_one_link(relationship_type, value)

        for relationship_type, values in (field_data.get("to_many") or {}).items():
            self.replace_to_many_links(relationship_type, values)

        return ChangeResult.COMPLETED

    # ========================================================================
    # Relationship mutations
    # ========================================================================

    def create_to_many_links(self, relationship_type: str, relationship_key_values: Sequence[Any]) -> ChangeResult:
        return self.change(
            "create_to_many_link",
            lambda: self._create_to_many_links(relationship_type, relationship_key_values),
        )

    def replace_to_many_links(self, relationship_type: str, relationship_key_values: Sequence[Any]) -> ChangeResult:
        return self.change(
            "replace_to_many_links",
            lambda: self._replace_to_many_links(relationship_type, relationship_key_values),
        )

    def replace_to_one_link(self, relationship_type: str, relationship_key_value: Any) -> ChangeResult:
        return self.change(
            "replace_to_one_link",
            lambda: self._replace_to_one_link(relationship_type, relationship_key_value),
        )

    def replace_polymorphic_to_one_link(
        self, relationship_type: str, relationship_key_value: Any, relationship_key_type: str
    ) -> ChangeResult:
        return self.change(
            "replace_polymorphic_to_one_link",
            lambda: self._replace_polymorphic_to_one_link(
                relationship_type, relationship_key_value, relationship_key_type
            ),
        )

    def remove_to_many_link(self, relationship_type: str, key: Any) -> ChangeResult:
        return self.change(
            "remove_to_many_link",
            lambda: self._remove_to_many_link(relationship_type, key),
        )

    def remove_to_one_link(self, relationship_type: str) -> ChangeResult:
        return self.change(
            "remove_to_one_link",
            lambda: self._remove_to_one_link(relationship_type),
        )

    def records_for(self, relation_name: str) -> Any:
        """
        Override on a resource to customize how related records are fetched
        (for example to scope them to the current user).
        """
        return getattr(self._model, relation_name)

    def records_for_relationship(self, relationship_name: str, options: Optional[dict] = None) -> Any:
        relationship = type(self)._relationships[relationship_name]
        return self.records_for(relationship.relation_name(context=self._context))

    def _relationship_or_fail(self, relationship_type: str) -> Relationship:
        relationship = type(self)._relationship(relationship_type)
        if relationship is None:
            raise KeyError(f"{type(self).__name__} has no relationship '{relationship_type}'")
        return relationship

    def _create_to_many_links(self, relationship_type: str, relationship_key_values: Sequence[Any]) -> ChangeResult:
        relationship = self._relationship_or_fail(relationship_type)
        relation_name = relationship.relation_name(context=self._context)
        primary_key = relationship.primary_key

        for relationship_key_value in relationship_key_values:
            related_resource = relationship.resource_klass.find_by_key(
                relationship_key_value, context=self._context
            )

            relation = getattr(self._model, relation_name)
            if any(getattr(record, primary_key) == related_resource.id for record in relation):
                raise HasManyRelationExists(relationship_key_value)

            relation.append(related_resource.model)
            logger.debug(
                f"Linked {relationship.name} {relationship_key_value!r} to "
                f"{type(self).__name__} {self.id!r}"
            )

        return ChangeResult.COMPLETED

    def _replace_to_many_links(self, relationship_type: str, relationship_key_values: Sequence[Any]) -> ChangeResult:
        relationship = self._relationship_or_fail(relationship_type)
        setattr(self, relationship.foreign_key, relationship_key_values)
        self.save_needed = True
        return ChangeResult.COMPLETED

    def _replace_to_one_link(self, relationship_type: str, relationship_key_value: Any) -> ChangeResult:
        relationship = self._relationship_or_fail(relationship_type)
        setattr(self, relationship.foreign_key, relationship_key_value)
        self.save_needed = True
        return ChangeResult.COMPLETED

    def _replace_polymorphic_to_one_link(self, relationship_type: str, key_value: Any, key_type: str) -> ChangeResult:
        relationship = self._relationship_or_fail(relationship_type)
        if not relationship.polymorphic:
            raise ValueError(f"{type(self).__name__}.{relationship.name} is not a polymorphic relationship")
        setattr(self._model, relationship.foreign_key, key_value)
        setattr(self._model, relationship.polymorphic_type, inflector.classify(key_type))
        self.save_needed = True
        return ChangeResult.COMPLETED

    def _remove_to_many_link(self, relationship_type: str, key: Any) -> ChangeResult:
        relationship = self._relationship_or_fail(relationship_type)
        relation_name = relationship.relation_name(context=self._context)
        getattr(self._model, relation_name).delete(key)
        return ChangeResult.COMPLETED

    def _remove_to_one_link(self, relationship_type: str) -> ChangeResult:
        relationship = self._relationship_or_fail(relationship_type)
        setattr(self, relationship.foreign_key, None)
        self.save_needed = True
        return ChangeResult.COMPLETED

    # ========================================================================
    # Declarations
    # ========================================================================

    @classmethod
    def _install_accessor(cls, name: str, accessor: Any) -> bool:
        """Add ``name`` to the accessor table unless something already owns it."""
        if name in cls._definition.accessors or hasattr(cls, name):
            logger.debug(f"{cls.__qualname__}.{name} already defined; accessor not installed")
            return False
        cls._definition.accessors[name] = accessor
        setattr(cls, name, accessor)
        return True

    @classmethod
    def attributes(cls, *names: str, **options: Any) -> None:
        for name in names:
            cls.attribute(name, **options)

    @classmethod
    def attribute(cls, name: str, **options: Any) -> None:
        cls._check_reserved_attribute_name(name)

        if name == "id" and options.get("format") is None:
            logger.warning(
                "Id without format is no longer supported. "
                "Please remove ids from attributes, or specify a format."
            )

        cls._attributes[name] = dict(options)

        accessor = Attribute(**options)
        accessor.__set_name__(cls, name)
        cls._install_accessor(name, accessor)

    @classmethod
    def _attribute_options(cls, name: str) -> Dict[str, Any]:
        return {**cls.default_attribute_options(), **cls._attributes[name]}

    @classmethod
    def default_attribute_options(cls) -> Dict[str, Any]:
        return dict(DEFAULT_ATTRIBUTE_OPTIONS)

    @classmethod
    def relationship(cls, *names: str, to: str, **options: Any) -> None:
        if to == "one":
            klass = ToOne
        elif to == "many":
            klass = ToMany
        else:
            raise ValueError("to: must be either 'one' or 'many'")
        cls._add_relationship(klass, *names, **options)

    @classmethod
    def has_one(cls, *names: str, **options: Any) -> None:
        cls._add_relationship(ToOne, *names, **options)

    @classmethod
    def has_many(cls, *names: str, **options: Any) -> None:
        cls._add_relationship(ToMany, *names, **options)

    @classmethod
    def _add_relationship(cls, klass: Type[Relationship], *names: str, **options: Any) -> None:
        options["parent_resource"] = cls

        for name in names:
            cls._check_reserved_relationship_name(name)

            relationship = klass(name, **options)
            cls._relationships[name] = relationship

            for accessor_name, accessor in build_accessors(relationship).items():
                cls._install_accessor(accessor_name, accessor)

    @classmethod
    def _relationship(cls, name: str) -> Optional[Relationship]:
        return cls._relationships.get(name)

    @classmethod
    def _updatable_relationships(cls) -> List[str]:
        return list(cls._relationships)

    @classmethod
    def _check_reserved_attribute_name(cls, name: str) -> None:
        # ``id`` is allowed so its format can be declared
        if name in RESERVED_ATTRIBUTE_NAMES and get_config().warn_on_reserved_names:
            logger.warning(f"[NAME COLLISION] `{name}` is a reserved key in {cls.__qualname__}.")

    @classmethod
    def _check_reserved_relationship_name(cls, name: str) -> None:
        if name in RESERVED_RELATIONSHIP_NAMES and get_config().warn_on_reserved_names:
            logger.warning(f"[NAME COLLISION] `{name}` is a reserved relationship name in {cls.__qualname__}.")

    @classmethod
    def set_callback(cls, kind: str, position: str, hook: Hook) -> None:
        """
        Attach a hook after class creation.

        ``hook`` is a method name or a callable taking the resource (and
        ``proceed`` for around hooks).
        """
        if position not in POSITIONS:
            raise ValueError(f"Callback position must be one of {POSITIONS}, got {position!r}")
        cls._definition.callbacks.add(kind, position, hook)

    # ========================================================================
    # Fields
    # ========================================================================

    @classmethod
    def fields(cls) -> List[str]:
        return _union(cls._relationships, cls._attributes)

    @classmethod
    def updatable_fields(cls, context: Any = None) -> List[str]:
        """Override in your resource to filter the updatable keys."""
        return _union(cls._updatable_relationships(), [name for name in cls._attributes if name != "id"])

    @classmethod
    def creatable_fields(cls, context: Any = None) -> List[str]:
        """Override in your resource to filter the creatable keys."""
        return _union(cls._updatable_relationships(), cls._attributes)

    @classmethod
    def sortable_fields(cls, context: Any = None) -> List[str]:
        """Override in your resource to filter the sortable keys."""
        return list(cls._attributes)

    # ========================================================================
    # Query hooks (pass-through; query building lives outside the engine)
    # ========================================================================

    @classmethod
    def apply_includes(cls, records: Any, options: Optional[dict] = None) -> Any:
        return records

    @classmethod
    def apply_pagination(cls, records: Any, options: Optional[dict] = None) -> Any:
        return records

    @classmethod
    def apply_sort(cls, records: Any, options: Optional[dict] = None) -> Any:
        return records

    @classmethod
    def apply_filters(cls, records: Any, options: Optional[dict] = None) -> Any:
        return records

    @classmethod
    def resolve_relationship_names_to_relations(
        cls,
        resource_klass: Type[Resource],
        model_includes: Union[str, Sequence[Any], Mapping[str, Any]],
        context: Any = None,
    ) -> Any:
        """
        Translate relationship names in an include tree to relation names.

        ``"comments"``, ``["comments", "tags"]`` and
        ``{"comments": ["author"]}`` shapes are supported.
        """
        if isinstance(model_includes, str):
            return resource_klass._relationships[model_includes].relation_name(context=context)

        if isinstance(model_includes, Mapping):
            resolved = {}
            for key, value in model_includes.items():
                relationship = resource_klass._relationships[key]
                resolved[relationship.relation_name(context=context)] = (
                    cls.resolve_relationship_names_to_relations(relationship.resource_klass, value, context)
                )
            return resolved

        return [
            cls.resolve_relationship_names_to_relations(resource_klass, value, context)
            for value in model_includes
        ]

    # ========================================================================
    # Resolution
    # ========================================================================

    @classmethod
    def module_path(cls) -> str:
        namespace = cls._meta.namespace
        return f"{namespace}/" if namespace else ""

    @classmethod
    def resource_for(cls, type_name: str) -> Type[Resource]:
        type_name = str(type_name)
        type_with_module = type_name if "/" in type_name else cls.module_path() + type_name

        resource = ResourceRegistry.lookup(type_with_module)
        if resource is None:
            key = ResourceRegistry.key_for_type(type_with_module)
            raise ResourceNotFoundFault(type_name, f"{inflector.camelize(key)}Resource")
        return resource

    @classmethod
    def resource_for_model(cls, model: Any) -> Type[Resource]:
        return cls.resource_for(cls.resource_type_for(model))

    @classmethod
    def resource_type_for(cls, model: Any) -> str:
        model_name = inflector.underscore(type(model).__name__)
        hinted = cls._model_hints.get(model_name)
        if hinted:
            return hinted
        return model_name.rpartition("/")[2]

    @classmethod
    def model_hint(cls, model: Any = None, resource: Any = None) -> None:
        """Map a record class (or its name) to a resource type for polymorphic lookup."""
        model = model if model is not None else cls._model_name
        resource = resource if resource is not None else cls._type

        model_name = model.__name__ if isinstance(model, type) else str(model)
        if isinstance(resource, type) and issubclass(resource, Resource):
            resource_type = resource._type
        else:
            resource_type = str(resource)

        cls._model_hints[inflector.underscore(model_name)] = resource_type

    @classmethod
    def mutable(cls) -> bool:
        return not cls._immutable

    @classmethod
    def _as_parent_key(cls) -> str:
        return f"{inflector.singularize(cls._type)}_id"

    # ========================================================================
    # Records
    # ========================================================================

    @classmethod
    def create(cls, context: Any = None) -> Resource:
        return cls(cls.create_model(), context)

    @classmethod
    def create_model(cls) -> Any:
        model_class = cls._model_class
        if model_class is None:
            raise ModelNotFoundFault(cls.__qualname__, cls._model_name)
        return model_class()

    @classmethod
    def find_by_key(cls, key: Any, context: Any = None) -> Resource:
        """
        Wrap the record identified by ``key``.

        Raises:
            RecordNotFound: The record class returned nothing
        """
        model_class = cls._model_class
        if model_class is None:
            raise ModelNotFoundFault(cls.__qualname__, cls._model_name)
        record = model_class.find_by_key(key, context=context)
        if record is None:
            raise RecordNotFound(key)
        return cls(record, context)

    @classmethod
    def verify_key(cls, key: Any, context: Any = None) -> Any:
        return KeyVerifier(cls.resource_key_type).verify(key, context)

    @classmethod
    def verify_keys(cls, keys: Iterable[Any], context: Any = None) -> List[Any]:
        """Override to allow for key processing and checking."""
        return [cls.verify_key(key, context) for key in keys]


def _union(*groups: Iterable[str]) -> List[str]:
    seen: Dict[str, None] = {}
    for group in groups:
        for name in group:
            seen.setdefault(name, None)
    return list(seen)
