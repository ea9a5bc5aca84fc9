"""
Typed values built from index descriptors.

IndexOptions and CollationOptions hold only what was present in the source
descriptor; ``None`` means "not set, leave the destination's default".
Both are frozen and render back to MongoDB wire keys via ``to_document()``.

This module is part of MONGO_INDEX_COPY.
"""

import copy
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, fields
from datetime import timedelta
from enum import Enum, IntEnum
from typing import Any, Protocol

from pymongo.operations import IndexModel

IndexDescriptor = Mapping[str, Any]
"""One document from ``Collection.list_indexes()``."""


class IndexSource(Protocol):
    """Anything that can list index descriptors (e.g. a pymongo Collection)."""

    def list_indexes(self, *args: Any, **kwargs: Any) -> Iterable[IndexDescriptor]: ...


class IndexDestination(Protocol):
    """Anything that can create a batch of indexes (e.g. a pymongo Collection)."""

    def create_indexes(self, indexes: list[IndexModel], *args: Any, **kwargs: Any) -> list[str]: ...


# ============================================================================
# COLLATION
# ============================================================================


class CaseFirst(str, Enum):
    UPPER = "upper"
    LOWER = "lower"
    OFF = "off"


class Strength(IntEnum):
    PRIMARY = 1
    SECONDARY = 2
    TERTIARY = 3
    QUATERNARY = 4
    IDENTICAL = 5


class Alternate(str, Enum):
    NON_IGNORABLE = "non-ignorable"
    SHIFTED = "shifted"


class MaxVariable(str, Enum):
    PUNCT = "punct"
    SPACE = "space"


@dataclass(frozen=True)
class CollationOptions:
    """
    Collation rules of an index.

    Attribute names are the snake_case form of the wire keys; ``WIRE_KEYS``
    gives the mapping used by ``to_document()``.
    """

    locale: str | None = None
    case_level: bool | None = None
    case_first: CaseFirst | None = None
    strength: Strength | None = None
    numeric_ordering: bool | None = None
    alternate: Alternate | None = None
    max_variable: MaxVariable | None = None
    normalization: bool | None = None
    backwards: bool | None = None

    WIRE_KEYS = {
        "locale": "locale",
        "case_level": "caseLevel",
        "case_first": "caseFirst",
        "strength": "strength",
        "numeric_ordering": "numericOrdering",
        "alternate": "alternate",
        "max_variable": "maxVariable",
        "normalization": "normalization",
        "backwards": "backwards",
    }

    def to_document(self) -> dict[str, Any]:
        """Render the collation sub-document accepted by createIndexes."""
        document: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, Enum):
                value = value.value
            document[self.WIRE_KEYS[f.name]] = value
        return document


# ============================================================================
# INDEX OPTIONS
# ============================================================================


@dataclass(frozen=True)
class IndexOptions:
    """Creation options of one index, reconstructed from its descriptor."""

    background: bool | None = None
    unique: bool | None = None
    name: str | None = None
    sparse: bool | None = None
    expire_after: timedelta | None = None
    version: int | None = None
    weights: Mapping[str, Any] | None = None
    default_language: str | None = None
    language_override: str | None = None
    text_index_version: int | None = None
    sphere_index_version: int | None = None
    bits: int | None = None
    min: int | float | None = None
    max: int | float | None = None
    bucket_size: int | float | None = None
    storage_engine: Mapping[str, Any] | None = None
    partial_filter_expression: Mapping[str, Any] | None = None
    collation: CollationOptions | None = None
    wildcard_projection: Mapping[str, Any] | None = None
    hidden: bool | None = None

    WIRE_KEYS = {
        "background": "background",
        "unique": "unique",
        "name": "name",
        "sparse": "sparse",
        "expire_after": "expireAfterSeconds",
        "version": "v",
        "weights": "weights",
        "default_language": "default_language",
        "language_override": "language_override",
        "text_index_version": "textIndexVersion",
        "sphere_index_version": "2dsphereIndexVersion",
        "bits": "bits",
        "min": "min",
        "max": "max",
        "bucket_size": "bucketSize",
        "storage_engine": "storageEngine",
        "partial_filter_expression": "partialFilterExpression",
        "collation": "collation",
        "wildcard_projection": "wildcardProjection",
        "hidden": "hidden",
    }

    def to_document(self) -> dict[str, Any]:
        """
        Render the options under their wire keys, skipping unset ones.

        Sub-documents are deep-copied so callers cannot mutate the options
        through the returned dict.
        """
        document: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, timedelta):
                value = int(value.total_seconds())
            elif isinstance(value, CollationOptions):
                value = value.to_document()
            elif isinstance(value, Mapping):
                value = copy.deepcopy(value)
            document[self.WIRE_KEYS[f.name]] = value
        return document


@dataclass(frozen=True)
class IndexCreateRequest:
    """Key specification plus options, ready to submit to a destination."""

    keys: tuple[tuple[str, Any], ...]
    options: IndexOptions

    @property
    def name(self) -> str | None:
        return self.options.name

    def to_index_model(self) -> IndexModel:
        return IndexModel(list(self.keys), **self.options.to_document())


@dataclass(frozen=True)
class CreateIndexesOptions:
    """
    Destination-side configuration of the batched createIndexes call.

    Attributes:
        max_time_ms: Server-side time limit (maxTimeMS)
        commit_quorum: Replica set members that must finish the build (commitQuorum)
        comment: Comment attached to the command
        session: ClientSession to run the command in
    """

    max_time_ms: int | None = None
    commit_quorum: int | str | None = None
    comment: Any | None = None
    session: Any | None = None

    def to_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``Collection.create_indexes``."""
        kwargs: dict[str, Any] = {}
        if self.max_time_ms is not None:
            kwargs["maxTimeMS"] = self.max_time_ms
        if self.commit_quorum is not None:
            kwargs["commitQuorum"] = self.commit_quorum
        if self.comment is not None:
            kwargs["comment"] = self.comment
        if self.session is not None:
            kwargs["session"] = self.session
        return kwargs
