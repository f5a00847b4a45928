"""
Resourcery Registry — global lookup of resource classes.

Resources are keyed by ``<namespace>/<underscored name>`` with the
``Resource`` suffix dropped, e.g. ``PostResource`` → ``"post"`` and
``BookResource`` in namespace ``api/v2`` → ``"api/v2/book"``. Lookups by
type name singularize first, so ``"posts"`` and ``"post"`` both find
``PostResource``.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Type, TYPE_CHECKING

from . import inflector

if TYPE_CHECKING:
    from .resource import Resource

logger = logging.getLogger("resourcery.registry")

__all__ = ["ResourceRegistry"]


class ResourceRegistry:
    """Global registry for all Resource subclasses."""

    _resources: Dict[str, Type[Resource]] = {}

    @staticmethod
    def key_for_class(resource_cls: Type[Resource]) -> str:
        name = inflector.demodulize(resource_cls.__name__)
        if name.endswith("Resource"):
            name = name[: -len("Resource")]
        return resource_cls.module_path() + inflector.underscore(name)

    @staticmethod
    def key_for_type(type_path: str) -> str:
        """``"api/v2/book_comments"`` → ``"api/v2/book_comment"``."""
        namespace, _, type_name = inflector.underscore(str(type_path)).rpartition("/")
        singular = inflector.singularize(type_name)
        return f"{namespace}/{singular}" if namespace else singular

    @classmethod
    def register(cls, resource_cls: Type[Resource]) -> None:
        key = cls.key_for_class(resource_cls)
        existing = cls._resources.get(key)
        if existing is not None and existing is not resource_cls:
            logger.debug(f"Resource key '{key}' rebound from {existing.__qualname__} to {resource_cls.__qualname__}")
        cls._resources[key] = resource_cls

    @classmethod
    def get(cls, key: str) -> Optional[Type[Resource]]:
        return cls._resources.get(key)

    @classmethod
    def lookup(cls, type_path: str) -> Optional[Type[Resource]]:
        return cls._resources.get(cls.key_for_type(type_path))

    @classmethod
    def all_resources(cls) -> Dict[str, Type[Resource]]:
        return dict(cls._resources)

    @classmethod
    def reset(cls) -> None:
        """Clear registry (for testing)."""
        cls._resources.clear()
