"""
Custom exceptions for MONGO_INDEX_COPY.

Every failure inside a copy is reported to callers as IndexCopyError, with
the specific error below chained as its cause.
"""

from typing import Any, Dict, List, Optional


class IndexCopyBaseError(RuntimeError):
    """
    Base exception for index copy errors.

    Attributes:
        message: Error message
        context: Optional dictionary with additional context (collection
                 names, field names, etc.)
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return formatted error message with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (context: {context_str})"
        return self.message


class IndexCopyError(IndexCopyBaseError):
    """
    Raised when copying indexes between two collections fails.

    This is the only exception the public copy functions raise. The
    original failure is always available as ``__cause__``.

    Attributes:
        message: Error message
        source: Source collection namespace (if available)
        destination: Destination collection namespace (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        destination: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if source:
            context["source"] = source
        if destination:
            context["destination"] = destination
        super().__init__(message, context=context)
        self.source = source
        self.destination = destination


class StoreAccessError(IndexCopyBaseError):
    """
    Raised when listing or creating indexes fails at the store layer.

    Attributes:
        message: Error message
        operation: Store operation that failed ("list_indexes" or "create_indexes")
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if operation:
            context["operation"] = operation
        super().__init__(message, context=context)
        self.operation = operation


class MissingIndexError(IndexCopyBaseError):
    """
    Raised when requested index names are not present in the source collection.

    Attributes:
        message: Error message listing the missing names
        missing_names: Sorted list of requested names that were not found
    """

    def __init__(
        self,
        message: str,
        missing_names: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, context=context)
        self.missing_names = missing_names or []


class InvalidOptionValueError(IndexCopyBaseError):
    """
    Raised when a descriptor field holds a value that cannot be turned into
    its typed option (wrong type, or an unrecognised enumeration value).

    Attributes:
        message: Error message
        field: Wire name of the offending field
        value: The raw value found in the descriptor
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if field:
            context["field"] = field
        if value is not None:
            context["value"] = value
        super().__init__(message, context=context)
        self.field = field
        self.value = value


class UnrecognizedFieldError(IndexCopyBaseError):
    """
    Raised under the strict unknown-field policy when a descriptor carries
    fields this library does not know how to copy.
    """

    def __init__(
        self,
        message: str,
        fields: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if fields:
            context["fields"] = fields
        super().__init__(message, context=context)
        self.fields = fields or []


class ConfigurationError(IndexCopyBaseError):
    """
    Raised when configuration is invalid.

    Attributes:
        message: Error message
        config_key: Configuration key that caused the error (if available)
        config_value: Configuration value that caused the error (if available)
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if config_key:
            context["config_key"] = config_key
        if config_value is not None:
            context["config_value"] = config_value
        super().__init__(message, context=context)
        self.config_key = config_key
        self.config_value = config_value
