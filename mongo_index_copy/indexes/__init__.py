"""
Index Copy Module

Reads index descriptors from a source collection, rebuilds their key
specifications and creation options, and creates them on a destination.

This module is part of MONGO_INDEX_COPY.
"""

from .copier import copy_all_indexes, copy_indexes, create_on_destination
from .helpers import collection_label, is_id_index, normalize_keys
from .reader import list_all_indexes, list_filtered_indexes
from .reconstruct import build_create_request, reconstruct_collation, reconstruct_options
from .types import (
    Alternate,
    CaseFirst,
    CollationOptions,
    CreateIndexesOptions,
    IndexCreateRequest,
    IndexDescriptor,
    IndexDestination,
    IndexOptions,
    IndexSource,
    MaxVariable,
    Strength,
)

__all__ = [
    # Copy operations
    "copy_all_indexes",
    "copy_indexes",
    "create_on_destination",
    # Reading
    "list_all_indexes",
    "list_filtered_indexes",
    # Reconstruction
    "build_create_request",
    "reconstruct_options",
    "reconstruct_collation",
    # Types
    "IndexDescriptor",
    "IndexSource",
    "IndexDestination",
    "IndexOptions",
    "IndexCreateRequest",
    "CreateIndexesOptions",
    "CollationOptions",
    "CaseFirst",
    "Strength",
    "Alternate",
    "MaxVariable",
    # Helpers
    "collection_label",
    "is_id_index",
    "normalize_keys",
]
