"""
Option reconstruction.

Turns one raw index descriptor into typed IndexOptions (and, for the
``collation`` field, CollationOptions). Each recognised wire key is looked up
independently; a field is only set when its key is present, so the
destination keeps its own defaults for everything else.

This module is part of MONGO_INDEX_COPY.
"""

import copy
from collections.abc import Callable, Mapping
from datetime import timedelta
from enum import Enum
from typing import Any, NamedTuple

from ..config import UnknownFieldPolicy
from ..constants import (
    COLLATION_FIELD,
    KEY_FIELD,
    STORE_ASSIGNED_COLLATION_FIELDS,
    STORE_ASSIGNED_FIELDS,
)
from ..exceptions import InvalidOptionValueError, UnrecognizedFieldError
from ..observability import get_logger
from .helpers import normalize_keys
from .types import (
    Alternate,
    CaseFirst,
    CollationOptions,
    IndexCreateRequest,
    IndexDescriptor,
    IndexOptions,
    MaxVariable,
    Strength,
)

logger = get_logger(__name__)


def _invalid(field: str, value: Any, expected: str) -> InvalidOptionValueError:
    return InvalidOptionValueError(
        f"Index field '{field}' must be {expected}, got {type(value).__name__} {value!r}",
        field=field,
        value=value,
    )


# ============================================================================
# CONVERTERS
# ============================================================================


def _as_bool(field: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise _invalid(field, value, "a boolean")


def _as_str(field: str, value: Any) -> str:
    if isinstance(value, str):
        return value
    raise _invalid(field, value, "a string")


def _as_int(field: str, value: Any) -> int:
    if isinstance(value, bool):
        raise _invalid(field, value, "an integer")
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise _invalid(field, value, "an integer")


def _as_number(field: str, value: Any) -> int | float:
    # int32 and double bounds both occur; the BSON type is kept as listed
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    raise _invalid(field, value, "a number")


def _as_seconds(field: str, value: Any) -> timedelta:
    return timedelta(seconds=_as_int(field, value))


def _as_document(field: str, value: Any) -> Mapping[str, Any]:
    if isinstance(value, Mapping):
        return copy.deepcopy(value)
    raise _invalid(field, value, "a document")


def _as_enum(enum_cls: type[Enum]) -> Callable[[str, Any], Enum]:
    allowed = ", ".join(repr(member.value) for member in enum_cls)

    def convert(field: str, value: Any) -> Enum:
        if isinstance(value, bool):
            raise _invalid(field, value, f"one of {allowed}")
        try:
            return enum_cls(value)
        except (ValueError, TypeError) as e:
            raise _invalid(field, value, f"one of {allowed}") from e

    return convert


class _FieldRule(NamedTuple):
    wire_key: str
    attribute: str
    convert: Callable[[str, Any], Any]


# ============================================================================
# FIELD TABLES
# ============================================================================

_COLLATION_RULES: tuple[_FieldRule, ...] = (
    _FieldRule("locale", "locale", _as_str),
    _FieldRule("caseLevel", "case_level", _as_bool),
    _FieldRule("caseFirst", "case_first", _as_enum(CaseFirst)),
    _FieldRule("strength", "strength", _as_enum(Strength)),
    _FieldRule("numericOrdering", "numeric_ordering", _as_bool),
    _FieldRule("alternate", "alternate", _as_enum(Alternate)),
    _FieldRule("maxVariable", "max_variable", _as_enum(MaxVariable)),
    _FieldRule("normalization", "normalization", _as_bool),
    _FieldRule("backwards", "backwards", _as_bool),
)


def _as_collation(field: str, value: Any, unknown_fields: UnknownFieldPolicy) -> CollationOptions:
    if not isinstance(value, Mapping):
        raise _invalid(field, value, "a document")
    kwargs = _apply_rules(
        value, _COLLATION_RULES, STORE_ASSIGNED_COLLATION_FIELDS, unknown_fields, prefix=f"{field}."
    )
    return CollationOptions(**kwargs)


# collation is handled separately because its conversion needs the policy
_OPTION_RULES: tuple[_FieldRule, ...] = (
    _FieldRule("background", "background", _as_bool),
    _FieldRule("unique", "unique", _as_bool),
    _FieldRule("name", "name", _as_str),
    _FieldRule("sparse", "sparse", _as_bool),
    _FieldRule("expireAfterSeconds", "expire_after", _as_seconds),
    _FieldRule("v", "version", _as_int),
    _FieldRule("weights", "weights", _as_document),
    _FieldRule("default_language", "default_language", _as_str),
    _FieldRule("language_override", "language_override", _as_str),
    _FieldRule("textIndexVersion", "text_index_version", _as_int),
    _FieldRule("2dsphereIndexVersion", "sphere_index_version", _as_int),
    _FieldRule("bits", "bits", _as_int),
    _FieldRule("min", "min", _as_number),
    _FieldRule("max", "max", _as_number),
    _FieldRule("bucketSize", "bucket_size", _as_number),
    _FieldRule("storageEngine", "storage_engine", _as_document),
    _FieldRule("partialFilterExpression", "partial_filter_expression", _as_document),
    _FieldRule("wildcardProjection", "wildcard_projection", _as_document),
    _FieldRule("hidden", "hidden", _as_bool),
)

RECOGNIZED_OPTION_FIELDS: frozenset[str] = frozenset(
    [rule.wire_key for rule in _OPTION_RULES] + [COLLATION_FIELD]
)
RECOGNIZED_COLLATION_FIELDS: frozenset[str] = frozenset(rule.wire_key for rule in _COLLATION_RULES)


def _apply_rules(
    document: Mapping[str, Any],
    rules: tuple[_FieldRule, ...],
    ignored: tuple[str, ...],
    unknown_fields: UnknownFieldPolicy,
    prefix: str = "",
    consumed: tuple[str, ...] = (),
) -> dict[str, Any]:
    known = {rule.wire_key for rule in rules}
    unknown = [
        k for k in document if k not in known and k not in ignored and k not in consumed
    ]
    if unknown:
        qualified = [f"{prefix}{k}" for k in unknown]
        if unknown_fields is UnknownFieldPolicy.STRICT:
            raise UnrecognizedFieldError(
                f"Index descriptor has unrecognized fields: {', '.join(qualified)}",
                fields=qualified,
            )
        logger.debug(f"Ignoring unrecognized index descriptor fields: {qualified}")

    kwargs: dict[str, Any] = {}
    for rule in rules:
        if rule.wire_key in document:
            kwargs[rule.attribute] = rule.convert(f"{prefix}{rule.wire_key}", document[rule.wire_key])
    return kwargs


# ============================================================================
# PUBLIC API
# ============================================================================


def reconstruct_collation(
    descriptor: IndexDescriptor,
    unknown_fields: UnknownFieldPolicy = UnknownFieldPolicy.IGNORE,
) -> CollationOptions:
    """
    Build CollationOptions from a descriptor's ``collation`` sub-document.

    Args:
        descriptor: Index descriptor that contains a ``collation`` field
        unknown_fields: Policy for collation keys that are not recognised

    Raises:
        InvalidOptionValueError: If a value has the wrong type or an
            enumerated value (caseFirst, strength, alternate, maxVariable)
            is not recognised
        UnrecognizedFieldError: Under the strict policy, for unknown keys
    """
    return _as_collation(COLLATION_FIELD, descriptor[COLLATION_FIELD], unknown_fields)


def reconstruct_options(
    descriptor: IndexDescriptor,
    unknown_fields: UnknownFieldPolicy = UnknownFieldPolicy.IGNORE,
) -> IndexOptions:
    """
    Build IndexOptions from an index descriptor.

    Every recognised field present in the descriptor is converted to its
    typed option. Nothing is defaulted or synthesised. The same descriptor
    always yields an equal result.

    Args:
        descriptor: One document from ``list_indexes()``
        unknown_fields: Policy for fields that are not recognised. The
            ``key`` field and store-assigned fields (``ns``) are never
            treated as unknown.

    Returns:
        IndexOptions with only the present fields set

    Raises:
        InvalidOptionValueError: If a field value cannot be converted
        UnrecognizedFieldError: Under the strict policy, for unknown fields
    """
    kwargs = _apply_rules(
        descriptor,
        _OPTION_RULES,
        STORE_ASSIGNED_FIELDS,
        unknown_fields,
        consumed=(KEY_FIELD, COLLATION_FIELD),
    )
    if COLLATION_FIELD in descriptor:
        kwargs["collation"] = reconstruct_collation(descriptor, unknown_fields)
    return IndexOptions(**kwargs)


def build_create_request(
    descriptor: IndexDescriptor,
    unknown_fields: UnknownFieldPolicy = UnknownFieldPolicy.IGNORE,
) -> IndexCreateRequest:
    """
    Pair a descriptor's key specification (verbatim) with its reconstructed options.

    Raises:
        InvalidOptionValueError: If the descriptor has no usable ``key`` field,
            or an option cannot be converted
    """
    keys = descriptor.get(KEY_FIELD)
    if not isinstance(keys, (Mapping, list, tuple)) or not keys:
        raise _invalid(KEY_FIELD, keys, "a non-empty key document")
    return IndexCreateRequest(
        keys=tuple(normalize_keys(copy.deepcopy(keys))),
        options=reconstruct_options(descriptor, unknown_fields),
    )
