"""
Resourcery Attributes — declared resource attributes.

``Attribute`` is both the declaration and the accessor: reading or writing
it on a resource goes to the backing record unless a custom getter/setter is
attached, property-style:

    class PostResource(Resource):
        title = Attribute()
        subject = Attribute()

        @subject.getter
        def subject(self):
            return self.model.title
"""

from __future__ import annotations

import copy
from typing import Any, Callable, Dict, Optional

__all__ = ["Attribute", "DEFAULT_ATTRIBUTE_OPTIONS"]

DEFAULT_ATTRIBUTE_OPTIONS: Dict[str, Any] = {"format": "default"}


class Attribute:
    """
    Declared attribute of a resource.

    Args:
        **options: Free-form options kept in the type's attribute table
            (``format`` is the one the engine knows about).
    """

    def __init__(
        self,
        fget: Optional[Callable[[Any], Any]] = None,
        fset: Optional[Callable[[Any, Any], None]] = None,
        **options: Any,
    ):
        self.name: Optional[str] = None
        self.fget = fget
        self.fset = fset
        self.options = options

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def _replace(self, **changes: Any) -> Attribute:
        attr = copy.copy(self)
        attr.options = dict(self.options)
        for key, value in changes.items():
            setattr(attr, key, value)
        return attr

    def getter(self, fget: Callable[[Any], Any]) -> Attribute:
        return self._replace(fget=fget)

    def setter(self, fset: Callable[[Any, Any], None]) -> Attribute:
        return self._replace(fset=fset)

    def __get__(self, instance: Any, owner: type) -> Any:
        if instance is None:
            return self
        if self.fget is not None:
            return self.fget(instance)
        return getattr(instance.model, self.name)

    def __set__(self, instance: Any, value: Any) -> None:
        if self.fset is not None:
            self.fset(instance, value)
        else:
            setattr(instance.model, self.name, value)

    def __repr__(self) -> str:
        return f"<Attribute {self.name!r} {self.options}>"
