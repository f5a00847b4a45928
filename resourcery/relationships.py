"""
Resourcery Relationships — declarative to-one / to-many associations.

A relationship knows how to derive its foreign key, related class name,
related type and relation name, and produces the accessors a resource class
exposes for it:

    record_for_<name>() / records_for_<name>()   raw related record(s)
    <foreign_key>                                 key property
    <name>()                                      related resource(s)
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Type, Union, TYPE_CHECKING

from . import inflector

if TYPE_CHECKING:
    from .resource import Resource

logger = logging.getLogger("resourcery.relationships")

__all__ = [
    "Relationship",
    "ToOne",
    "ToMany",
    "build_accessors",
]

RelationName = Union[str, Callable[..., str]]


class Relationship:
    """
    Base relationship definition.

    Options:
        class_name: Related resource class name (``"Person"``)
        foreign_key: Explicit foreign key attribute name
        relation_name: Record attribute holding the relation, or a callable
            ``(context=...) -> str`` evaluated on every use
        polymorphic: Resolve the related resource per record
        acts_as_set: To-many replacement is set-based rather than positional
        parent_resource: Owning resource class (set by registration)
    """

    cardinality: str = ""

    def __init__(self, name: Optional[str] = None, **options: Any):
        self.name = name
        self.options = options
        self.acts_as_set: bool = options.get("acts_as_set", False) is True
        self.polymorphic: bool = options.get("polymorphic", False) is True
        self.parent_resource: Optional[Type[Resource]] = options.get("parent_resource")
        self._relation_name: Optional[RelationName] = options.get("relation_name")
        self._resource_klass: Optional[Type[Resource]] = None

    # ── Derived names ────────────────────────────────────────────────

    @property
    def class_name(self) -> str:
        raise NotImplementedError

    @property
    def foreign_key(self) -> str:
        raise NotImplementedError

    @property
    def type(self) -> str:
        return inflector.pluralize(inflector.underscore(self.class_name))

    @property
    def records_accessor_name(self) -> str:
        raise NotImplementedError

    def relation_name(self, context: Any = None) -> str:
        relation_name = self._relation_name
        if relation_name is None:
            return self.name
        if callable(relation_name):
            return str(relation_name(context=context))
        return str(relation_name)

    # ── Resolution ───────────────────────────────────────────────────

    @property
    def resource_klass(self) -> Type[Resource]:
        if self._resource_klass is None:
            self._resource_klass = self.parent_resource.resource_for(self.class_name)
            logger.debug(
                f"Resolved {self.parent_resource.__name__}.{self.name} to {self._resource_klass.__name__}"
            )
        return self._resource_klass

    @property
    def primary_key(self) -> str:
        return self.resource_klass._primary_key

    def type_for_source(self, source: Resource) -> Optional[str]:
        """Related type as seen from ``source``; per record when polymorphic."""
        if self.polymorphic:
            resource = getattr(source, self.name)()
            return type(resource)._type if resource is not None else None
        return self.type

    def __repr__(self) -> str:
        owner = self.parent_resource.__name__ if self.parent_resource else None
        return f"<{type(self).__name__} {self.name!r} of {owner}>"


class ToOne(Relationship):
    """
    Single related resource.

    ``foreign_key_on="self"`` (default) means this record holds the key;
    ``"related"`` means the related record points back at this one.
    """

    cardinality = "one"

    def __init__(self, name: Optional[str] = None, **options: Any):
        super().__init__(name, **options)
        self.foreign_key_on: str = options.get("foreign_key_on", "self")

    @property
    def class_name(self) -> str:
        return self.options.get("class_name") or inflector.camelize(self.name)

    @property
    def foreign_key(self) -> str:
        return self.options.get("foreign_key") or f"{self.name}_id"

    @property
    def belongs_to(self) -> bool:
        return self.foreign_key_on == "self"

    @property
    def polymorphic_type(self) -> Optional[str]:
        if self.polymorphic:
            return f"{inflector.singularize(self.type)}_type"
        return None

    @property
    def records_accessor_name(self) -> str:
        return f"record_for_{self.name}"


class ToMany(Relationship):
    """Ordered collection of related resources."""

    cardinality = "many"

    @property
    def class_name(self) -> str:
        return self.options.get("class_name") or inflector.camelize(inflector.singularize(self.name))

    @property
    def foreign_key(self) -> str:
        return self.options.get("foreign_key") or f"{inflector.singularize(self.name)}_ids"

    @property
    def records_accessor_name(self) -> str:
        return f"records_for_{self.name}"


# ============================================================================
# Accessor generation
# ============================================================================


def _named(fn: Callable, name: str) -> Callable:
    fn.__name__ = name
    fn.__qualname__ = name
    return fn


def build_accessors(relationship: Relationship) -> Dict[str, Any]:
    """
    Build the accessor table entries for one relationship.

    Accessors look the relationship up on ``type(self)`` at call time, so an
    accessor installed on a parent class serves the subclass's rebound copy.
    """
    name = relationship.name
    foreign_key = relationship.foreign_key
    records_name = relationship.records_accessor_name

    def records_accessor(self, options: Optional[dict] = None):
        return self.records_for_relationship(name, options)

    accessors: Dict[str, Any] = {records_name: _named(records_accessor, records_name)}

    if isinstance(relationship, ToOne):
        if relationship.belongs_to:
            def get_key(self):
                return getattr(self.model, foreign_key)

            def set_key(self, value):
                setattr(self.model, foreign_key, value)
        else:
            def get_key(self):
                related = type(self)._relationships[name]
                record = getattr(self, records_name)()
                if record is None:
                    return None
                return getattr(record, related.resource_klass._primary_key)

            def set_key(self, value):
                raise AttributeError(
                    f"{type(self).__name__}.{foreign_key} is held by the related record; "
                    f"change the '{name}' relationship instead"
                )

        def to_one(self, options: Optional[dict] = None):
            related = type(self)._relationships[name]
            record = getattr(self, records_name)()
            if record is None:
                return None
            if related.polymorphic:
                resource_klass = type(self).resource_for_model(record)
            else:
                resource_klass = related.resource_klass
            return resource_klass(record, self.context)

        accessors[foreign_key] = property(get_key, set_key, doc=f"Foreign key of '{name}'")
        accessors[name] = _named(to_one, name)

    else:
        def get_keys(self) -> List[Any]:
            related = type(self)._relationships[name]
            return [
                getattr(record, related.resource_klass._primary_key)
                for record in getattr(self, records_name)()
            ]

        def set_keys(self, values):
            setattr(self.model, foreign_key, list(values) if values is not None else [])

        def to_many(self, options: Optional[dict] = None):
            related = type(self)._relationships[name]
            resources = []
            for record in getattr(self, records_name)(options):
                if related.polymorphic:
                    resource_klass = type(self).resource_for_model(record)
                else:
                    resource_klass = related.resource_klass
                resources.append(resource_klass(record, self.context))
            return resources

        accessors[foreign_key] = property(get_keys, set_keys, doc=f"Keys of '{name}'")
        accessors[name] = _named(to_many, name)

    return accessors
