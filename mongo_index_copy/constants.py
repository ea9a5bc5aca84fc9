"""
Constants for MONGO_INDEX_COPY.

Wire names of the fields MongoDB reports in index descriptors, and the
fixed messages and operation names used across the package.
"""

from typing import Final

# ============================================================================
# INDEX DESCRIPTOR FIELDS
# ============================================================================

KEY_FIELD: Final[str] = "key"
"""Descriptor field holding the ordered key specification."""

NAME_FIELD: Final[str] = "name"
"""Descriptor field holding the index name."""

COLLATION_FIELD: Final[str] = "collation"
"""Descriptor field holding the collation sub-document."""

STORE_ASSIGNED_FIELDS: Final[tuple[str, ...]] = ("ns",)
"""Fields the server fills in itself; never copied and never 'unknown'."""

STORE_ASSIGNED_COLLATION_FIELDS: Final[tuple[str, ...]] = ("version",)
"""Collation keys the server fills in itself (ICU version)."""

ID_INDEX_NAME: Final[str] = "_id_"
"""Name of the default index MongoDB creates on every collection."""

# ============================================================================
# ERROR MESSAGES
# ============================================================================

INDEX_COPY_FAILED_MESSAGE: Final[str] = (
    "Could not copy MongoDB indexes from source collection to destination collection"
)
"""Fixed message of every IndexCopyError."""

# ============================================================================
# OPERATION NAMES (logging / metrics)
# ============================================================================

OPERATION_COPY_ALL: Final[str] = "index_copy.copy_all"
OPERATION_COPY_NAMED: Final[str] = "index_copy.copy_named"

# ============================================================================
# CONFIGURATION
# ============================================================================

UNKNOWN_FIELDS_ENV: Final[str] = "MONGO_INDEX_COPY_UNKNOWN_FIELDS"
METRICS_ENABLED_ENV: Final[str] = "MONGO_INDEX_COPY_METRICS_ENABLED"

DEFAULT_MAX_METRICS: Final[int] = 1000
"""Maximum number of distinct metric keys kept before evicting the oldest."""
