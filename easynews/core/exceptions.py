"""Custom exceptions for the easy-news application.

This module defines all custom exceptions used throughout the application.
All exceptions inherit from EasyNewsError for easy catching.

Exception classes include context dictionaries for structured logging
and debugging. Use the `context` property to access additional details.
"""

from typing import Any


class EasyNewsError(Exception):
    """Base exception for all easy-news errors.

    Provides a context dictionary for structured error information.

    Attributes:
        context: Dictionary with additional error context

    Example:
        >>> try:
        ...     raise EasyNewsError("Something went wrong", context={"feed": "ERT"})
        ... except EasyNewsError as e:
        ...     print(f"Error: {e}, Context: {e.context}")
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Initialize EasyNewsError.

        Args:
            message: Error message
            context: Optional dictionary with additional context
        """
        self.context = context or {}
        super().__init__(message)

    def with_context(self, **kwargs: Any) -> "EasyNewsError":
        """Add additional context to the exception.

        Args:
            **kwargs: Key-value pairs to add to context

        Returns:
            Self for method chaining
        """
        self.context.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization.

        Returns:
            Dictionary with error type, message, and context
        """
        return {
            "error_type": self.__class__.__name__,
            "message": str(self),
            "context": self.context,
        }


# ============================================
# Configuration Errors
# ============================================


class ConfigError(EasyNewsError):
    """Base exception for configuration-related errors."""

    def __init__(
        self,
        message: str,
        config_path: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize ConfigError.

        Args:
            message: Error message
            config_path: Path to the config file/key
            context: Additional context
        """
        ctx = context or {}
        if config_path:
            ctx["config_path"] = config_path
        super().__init__(message, context=ctx)


class ConfigValidationError(ConfigError):
    """Raised when configuration validation fails.

    Supports two usage patterns:
    1. Simple: ConfigValidationError("error message")
    2. Structured: ConfigValidationError(field="name", value="x", reason="invalid")
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        field: str | None = None,
        value: Any = None,
        reason: str | None = None,
        config_path: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize ConfigValidationError.

        Args:
            message: Error message (for simple usage)
            field: Field that failed validation
            value: Invalid value
            reason: Validation failure reason
            config_path: Path to config file
            context: Additional context
        """
        ctx = context or {}

        self.field = field
        self.value = value
        self.reason = reason

        if field and reason:
            ctx.update({"field": field, "reason": reason})
            if value is not None:
                ctx["value"] = str(value)
            final_message = f"Config validation failed for '{field}': {reason}"
        elif message:
            final_message = message
        else:
            final_message = "Configuration validation failed"

        super().__init__(final_message, config_path=config_path, context=ctx)


class ConfigNotFoundError(ConfigError):
    """Raised when a required configuration is not found.

    Attributes:
        config_key: The configuration key that was not found
    """

    def __init__(
        self,
        config_key: str,
        config_path: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize ConfigNotFoundError.

        Args:
            config_key: Configuration key that was not found
            config_path: Path to config file
            context: Additional context
        """
        ctx = context or {}
        ctx["config_key"] = config_key
        super().__init__(
            f"Configuration '{config_key}' not found",
            config_path=config_path,
            context=ctx,
        )
        self.config_key = config_key


# ============================================
# Service Errors
# ============================================


class ServiceError(EasyNewsError):
    """Base exception for errors raised by external collaborators."""

    def __init__(
        self,
        message: str,
        service_name: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize ServiceError.

        Args:
            message: Error message
            service_name: Name of the service that failed
            context: Additional context
        """
        ctx = context or {}
        if service_name:
            ctx["service"] = service_name
        super().__init__(message, context=ctx)


class FeedFetchError(ServiceError):
    """Raised when a single feed cannot be fetched or parsed.

    Attributes:
        feed_url: URL of the failing feed
    """

    def __init__(
        self,
        feed_url: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        ctx["feed_url"] = feed_url
        self.feed_url = feed_url
        super().__init__(f"Feed fetch failed: {message}", service_name="rss", context=ctx)


class ClassificationError(ServiceError):
    """Raised when the classifier/summarizer cannot produce a result.

    Attributes:
        topic_id: Cluster id that was being classified
        stage: "call" for transport/model failures, "parse" for bad responses
    """

    def __init__(
        self,
        message: str,
        topic_id: str | None = None,
        stage: str = "call",
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        ctx["stage"] = stage
        if topic_id:
            ctx["topic_id"] = topic_id
        self.topic_id = topic_id
        self.stage = stage
        super().__init__(message, service_name="classifier", context=ctx)


# ============================================
# Output Errors
# ============================================


class OutputWriteError(EasyNewsError):
    """Raised when a JSON artifact cannot be persisted.

    This error is fatal for a run; there is no partial-write recovery.

    Attributes:
        path: Target file path
    """

    def __init__(
        self,
        path: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        ctx["path"] = path
        self.path = path
        super().__init__(f"Failed to write {path}: {message}", context=ctx)


class InputReadError(EasyNewsError):
    """Raised when a previously built artifact cannot be read back."""

    def __init__(
        self,
        path: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        ctx["path"] = path
        self.path = path
        super().__init__(f"Failed to read {path}: {message}", context=ctx)
