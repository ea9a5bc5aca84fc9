"""
Index copy orchestration.

Reads descriptors from a source collection, rebuilds each one as an
IndexModel and creates them all on the destination in one batched call.
Any failure on the way is reported as a single IndexCopyError.

This module is part of MONGO_INDEX_COPY.
"""

import time
from collections.abc import Callable, Iterable

from pymongo.errors import PyMongoError

from ..config import IndexCopyConfig
from ..constants import INDEX_COPY_FAILED_MESSAGE, OPERATION_COPY_ALL, OPERATION_COPY_NAMED
from ..exceptions import IndexCopyError, StoreAccessError
from ..observability import copy_scope, get_logger, log_operation, record_operation
from .helpers import collection_label
from .reader import list_all_indexes, list_filtered_indexes
from .reconstruct import build_create_request
from .types import (
    CreateIndexesOptions,
    IndexCreateRequest,
    IndexDescriptor,
    IndexDestination,
    IndexSource,
)

logger = get_logger(__name__)


def copy_indexes(
    index_names: Iterable[str],
    source: IndexSource,
    destination: IndexDestination,
    create_options: CreateIndexesOptions | None = None,
    *,
    config: IndexCopyConfig | None = None,
) -> list[str]:
    """
    Copy the named indexes from one collection to another.

    Args:
        index_names: Names of the indexes to copy; all must exist in source.
            A single string is taken as one name.
        source: Collection the indexes are read from
        destination: Collection the indexes are created on
        create_options: Options for the batched createIndexes call
        config: Copy configuration (built from the environment if omitted)

    Returns:
        Names of the indexes submitted to the destination

    Raises:
        IndexCopyError: If anything fails; the original error is the cause
    """
    return _perform_index_copy(
        OPERATION_COPY_NAMED,
        source,
        destination,
        create_options,
        config,
        lambda: list_filtered_indexes(source, index_names),
    )


def copy_all_indexes(
    source: IndexSource,
    destination: IndexDestination,
    create_options: CreateIndexesOptions | None = None,
    *,
    config: IndexCopyConfig | None = None,
) -> list[str]:
    """
    Copy every index (including ``_id_``) from one collection to another.

    Args:
        source: Collection the indexes are read from
        destination: Collection the indexes are created on
        create_options: Options for the batched createIndexes call
        config: Copy configuration (built from the environment if omitted)

    Returns:
        Names of the indexes submitted to the destination

    Raises:
        IndexCopyError: If anything fails; the original error is the cause
    """
    return _perform_index_copy(
        OPERATION_COPY_ALL,
        source,
        destination,
        create_options,
        config,
        lambda: list_all_indexes(source),
    )


def create_on_destination(
    destination: IndexDestination,
    requests: list[IndexCreateRequest],
    create_options: CreateIndexesOptions | None = None,
) -> list[str]:
    """
    Submit all requests to the destination in a single createIndexes call.

    Raises:
        StoreAccessError: If the store rejects the batch
    """
    models = [request.to_index_model() for request in requests]
    kwargs = create_options.to_kwargs() if create_options else {}
    try:
        return destination.create_indexes(models, **kwargs)
    except PyMongoError as e:
        raise StoreAccessError(
            f"Could not create indexes on collection '{collection_label(destination)}'",
            operation="create_indexes",
        ) from e


def _perform_index_copy(
    operation: str,
    source: IndexSource,
    destination: IndexDestination,
    create_options: CreateIndexesOptions | None,
    config: IndexCopyConfig | None,
    read_descriptors: Callable[[], list[IndexDescriptor]],
) -> list[str]:
    source_label = collection_label(source)
    destination_label = collection_label(destination)
    log_prefix = f"[{source_label} -> {destination_label}]"

    with copy_scope(source_label, destination_label):
        start_time = time.time()
        submitted: list[str] = []
        success = True
        try:
            config = config or IndexCopyConfig()
            descriptors = read_descriptors()
            requests = [build_create_request(d, config.unknown_field_policy) for d in descriptors]
            if not requests:
                logger.info(f"{log_prefix} No indexes to copy; destination left untouched.")
                return []

            submitted = [request.name for request in requests]
            logger.info(f"{log_prefix} Creating {len(requests)} index(es): {submitted}")
            created = create_on_destination(destination, requests, create_options)
            logger.debug(f"{log_prefix} Destination reported created indexes: {created}")
            return submitted
        except Exception as e:
            success = False
            logger.error(f"{log_prefix} Index copy failed: {e}", exc_info=True)
            raise IndexCopyError(
                INDEX_COPY_FAILED_MESSAGE, source=source_label, destination=destination_label
            ) from e
        finally:
            duration_ms = (time.time() - start_time) * 1000
            log_operation(
                logger,
                operation,
                success=success,
                duration_ms=duration_ms,
                indexes=len(submitted),
            )
            if config is None or config.metrics_enabled:
                record_operation(
                    operation,
                    duration_ms,
                    success,
                    indexes_submitted=len(submitted) if success else 0,
                )
