"""
MONGO_INDEX_COPY - copy MongoDB index definitions between collections

Rebuilds each index's key specification and creation options (collation
included) from the descriptors ``list_indexes()`` returns, and creates them
on another collection in one batched call.
"""

from .config import IndexCopyConfig, UnknownFieldPolicy
from .exceptions import (
    ConfigurationError,
    IndexCopyBaseError,
    IndexCopyError,
    InvalidOptionValueError,
    MissingIndexError,
    StoreAccessError,
    UnrecognizedFieldError,
)
from .indexes import (
    CollationOptions,
    CreateIndexesOptions,
    IndexCreateRequest,
    IndexOptions,
    copy_all_indexes,
    copy_indexes,
    reconstruct_options,
)

__version__ = "0.1.0"

__all__ = [
    # Copy operations
    "copy_all_indexes",
    "copy_indexes",
    "reconstruct_options",
    # Types
    "IndexOptions",
    "CollationOptions",
    "IndexCreateRequest",
    "CreateIndexesOptions",
    # Configuration
    "IndexCopyConfig",
    "UnknownFieldPolicy",
    # Errors
    "IndexCopyBaseError",
    "IndexCopyError",
    "StoreAccessError",
    "MissingIndexError",
    "InvalidOptionValueError",
    "UnrecognizedFieldError",
    "ConfigurationError",
]
