"""
Helper functions for index copying.

Small utilities shared by the reader, reconstructor and orchestrator.
"""

from collections.abc import Mapping
from typing import Any

from ..constants import ID_INDEX_NAME, KEY_FIELD, NAME_FIELD


def normalize_keys(
    keys: Mapping[str, Any] | list[tuple[str, Any]],
) -> list[tuple[str, Any]]:
    """
    Normalize index keys to an ordered list of (field_name, direction) tuples.

    Args:
        keys: Index keys as an ordered mapping (e.g. SON) or list of tuples

    Returns:
        List of (field_name, direction) tuples in their original order
    """
    if isinstance(keys, Mapping):
        return [(k, v) for k, v in keys.items()]
    return [tuple(pair) for pair in keys]


def is_id_index(descriptor: Mapping[str, Any]) -> bool:
    """
    Check if a descriptor describes the default _id index.

    The copy functions never skip it; this is for callers that want to.
    """
    if descriptor.get(NAME_FIELD) == ID_INDEX_NAME:
        return True
    keys = descriptor.get(KEY_FIELD)
    if isinstance(keys, Mapping):
        return len(keys) == 1 and "_id" in keys
    return False


def index_names(descriptors: list[Mapping[str, Any]]) -> list[str | None]:
    """Names of the given descriptors, in order."""
    return [d.get(NAME_FIELD) for d in descriptors]


def collection_label(collection: Any) -> str:
    """
    Human readable label for a collection-like object.

    Uses the pymongo ``full_name`` ("db.collection") when there is one and
    falls back to the type name for test doubles and custom sources.
    """
    full_name = getattr(collection, "full_name", None)
    if isinstance(full_name, str) and full_name:
        return full_name
    return type(collection).__name__
