"""
Resourcery Keys — verification of externally supplied identifiers.

Whatever goes wrong while checking a key, callers only ever see
``InvalidFieldValue``.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, List, Sequence, Union

from .faults import InvalidFieldValue

logger = logging.getLogger("resourcery.keys")

__all__ = ["KeyVerifier", "UUID_PATTERN"]

UUID_PATTERN = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)

KeyType = Union[str, Callable[[Any, Any], Any]]


class KeyVerifier:
    """Normalizes keys for one configured key type."""

    __slots__ = ("key_type",)

    def __init__(self, key_type: KeyType = "integer"):
        self.key_type = key_type

    def verify(self, key: Any, context: Any = None) -> Any:
        try:
            return self._verify(key, context)
        except InvalidFieldValue:
            raise
        except Exception as exc:
            logger.debug(f"Key {key!r} rejected by {self.key_type!r} verifier: {exc}")
            raise InvalidFieldValue("id", key) from exc

    def verify_many(self, keys: Sequence[Any], context: Any = None) -> List[Any]:
        return [self.verify(key, context) for key in keys]

    def _verify(self, key: Any, context: Any) -> Any:
        key_type = self.key_type

        if callable(key_type):
            return key_type(key, context)

        if key is None:
            return None

        if key_type == "integer":
            if isinstance(key, bool):
                raise InvalidFieldValue("id", key)
            if isinstance(key, int):
                return key
            return int(str(key).strip(), 10)

        if key_type == "string":
            if "," in str(key):
                raise InvalidFieldValue("id", key)
            return key

        if key_type == "uuid":
            if UUID_PATTERN.match(str(key)):
                return key
            raise InvalidFieldValue("id", key)

        raise InvalidFieldValue("id", key)

    def __repr__(self) -> str:
        return f"KeyVerifier({self.key_type!r})"
