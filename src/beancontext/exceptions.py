"""
Exception hierarchy for configuration contexts and the bean container.

Every failure the context facade reports is a ``ConfigurationError``; the
container's own errors subclass it so callers can catch either level.
"""

from typing import Any

__all__ = [
    "BeanContextError",
    "ConfigurationError",
    "ContainerError",
    "NoSuchBeanError",
    "NoUniqueBeanError",
    "BeanTypeError",
    "BeanCreationError",
    "DefinitionError",
    "ResourceError",
    "PropertiesFormatError",
]


class BeanContextError(Exception):
    """Base exception for all beancontext errors."""

    def __init__(
        self,
        message: str,
        *,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context: dict[str, Any] = context or {}

    def __str__(self) -> str:
        return self.message

    def most_specific_cause(self) -> BaseException:
        """Return the innermost chained cause, or this error if there is none."""
        root: BaseException | None = None
        cause = self.__cause__
        while cause is not None and cause is not root:
            root = cause
            cause = cause.__cause__
        return root if root is not None else self


class ConfigurationError(BeanContextError):
    """Raised when a context cannot be configured or a lookup fails."""


class ContainerError(ConfigurationError):
    """Raised by the bean container."""


class NoSuchBeanError(ContainerError):
    """No bean matches the requested name or type."""


class NoUniqueBeanError(ContainerError):
    """More than one bean matches the requested type."""


class BeanTypeError(ContainerError):
    """The named bean is not an instance of the required type."""


class BeanCreationError(ContainerError):
    """A bean factory raised while creating a bean."""


class DefinitionError(ContainerError):
    """A container definition file is missing or malformed."""


class ResourceError(ConfigurationError):
    """A resource location is invalid or cannot be read."""


class PropertiesFormatError(ConfigurationError):
    """A property resource has content that cannot be turned into a table."""
