"""
Descriptor reading.

Lists index descriptors from a source collection, optionally narrowed to a
set of requested names.

This module is part of MONGO_INDEX_COPY.
"""

from collections.abc import Iterable

from pymongo.errors import PyMongoError

from ..constants import NAME_FIELD
from ..exceptions import MissingIndexError, StoreAccessError
from ..observability import get_logger
from .helpers import collection_label, index_names
from .types import IndexDescriptor, IndexSource

logger = get_logger(__name__)


def list_all_indexes(source: IndexSource) -> list[IndexDescriptor]:
    """
    List every index descriptor of a collection, in the store's order.

    Args:
        source: Collection to list indexes from

    Returns:
        List of raw descriptor documents

    Raises:
        StoreAccessError: If the listing call fails at the store layer
    """
    label = collection_label(source)
    try:
        descriptors = list(source.list_indexes())
    except PyMongoError as e:
        logger.debug(f"[{label}] Failed to list indexes: {e}")
        raise StoreAccessError(
            f"Could not list indexes of collection '{label}'", operation="list_indexes"
        ) from e

    logger.debug(f"[{label}] Listed {len(descriptors)} index(es): {index_names(descriptors)}")
    return descriptors


def list_filtered_indexes(
    source: IndexSource, names: str | Iterable[str]
) -> list[IndexDescriptor]:
    """
    List the descriptors of the requested indexes only.

    Every requested name must be matched exactly by one descriptor.

    Args:
        source: Collection to list indexes from
        names: Index names to keep; a single string is one name

    Returns:
        Matching descriptors, in the store's order

    Raises:
        StoreAccessError: If the listing call fails at the store layer
        MissingIndexError: If any requested name is not present
    """
    requested = {names} if isinstance(names, str) else set(names)
    logger.debug(f"[{collection_label(source)}] Requested indexes: {sorted(requested)}")
    found = [d for d in list_all_indexes(source) if d.get(NAME_FIELD) in requested]

    missing = sorted(requested - {d.get(NAME_FIELD) for d in found})
    if missing:
        raise MissingIndexError(
            "Not all requested indexes are available in source MongoDB collection. "
            f"Missing indexes: [{', '.join(missing)}]",
            missing_names=missing,
        )
    return found
