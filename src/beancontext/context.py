"""
Configuration contexts: property lookup and bean lookup behind one interface.

``ContainerContext`` builds its container from a definition file the first
time anything needs it, then merges process environment variables over the
properties read from its property resources.
"""

import os
import threading
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TypeVar, overload

from .config.container import Container
from .config.definitions import load_container
from .config.properties import load_properties
from .config.settings import Settings
from .exceptions import ConfigurationError
from .observability.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class Context(ABC):
    """Application context."""

    @abstractmethod
    def get_property(self, key: str, default: str | None = None) -> str | None:
        """Search for the property with ``key``; return ``default`` if absent."""

    @abstractmethod
    def property_keys(self) -> set[str]:
        """Keys of all properties visible through this context."""

    @overload
    def get_bean(self, required_type: type[T]) -> T: ...

    @overload
    def get_bean(self, name: str, required_type: type[T]) -> T: ...

    @abstractmethod
    def get_bean(self, name_or_type, required_type=None):
        """
        Return a bean by unique type, or by name checked against a type.

        Raises:
            ConfigurationError: no bean matches, or the context cannot be built
        """

    @abstractmethod
    def contains_bean(self, name: str) -> bool:
        """True if a bean with ``name`` is defined."""


class ContainerContext(Context):
    """Context backed by a lazily loaded bean container."""

    def __init__(
        self,
        config_location: str | None = None,
        property_locations: Sequence[str] | None = None,
    ):
        self.config_location = config_location
        self.property_locations: tuple[str, ...] = tuple(property_locations or ())
        self._container: Container | None = None
        self._properties: dict[str, str] | None = None
        self._lock = threading.RLock()

        logger.info("configuration location", location=self.config_location)
        logger.info("property locations", locations=list(self.property_locations))

    @classmethod
    def from_settings(cls, settings: Settings) -> "ContainerContext":
        return cls(settings.config_location, settings.property_locations)

    @property
    def container(self) -> Container:
        """
        The container, loaded on first access.

        Raises:
            ConfigurationError: the container definition cannot be loaded
        """
        if self._container is None:
            with self._lock:
                if self._container is None:
                    self._container = self._create_container()
        return self._container

    def _create_container(self) -> Container:
        if self.config_location is None:
            return Container()
        try:
            return load_container(self.config_location)
        except Exception as e:
            raise ConfigurationError(
                f"failed to build container from '{self.config_location}': {e}",
                context={"location": self.config_location},
            ) from e

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    def get_property(self, key: str, default: str | None = None) -> str | None:
        value = os.environ.get(key)
        if value is not None:
            return value
        return self._config_properties().get(key, default)

    def property_keys(self) -> set[str]:
        keys = set(self._config_properties())
        keys.update(os.environ.keys())
        return keys

    def _config_properties(self) -> dict[str, str]:
        if self._properties is None:
            with self._lock:
                if self._properties is None:
                    self._properties = self._load_config_properties()
        return self._properties

    def _load_config_properties(self) -> dict[str, str]:
        properties: dict[str, str] = {}
        if not self.property_locations:
            return properties

        # Resources resolve through the container, so it must load first
        container = self.container
        for location in self.property_locations:
            try:
                resource = container.get_resource(location)
                if not resource.exists():
                    logger.warning("property resource missing (skip)", resource=resource.description)
                    continue
                loaded = load_properties(resource)
                logger.info("property resource", resource=resource.description, keys=len(loaded))
                properties.update(loaded)
            except ConfigurationError as e:
                logger.warning("property resource ERROR (skip)", location=location, error=str(e))
        return properties

    # ------------------------------------------------------------------
    # Beans
    # ------------------------------------------------------------------
    def get_bean(self, name_or_type, required_type=None):
        if isinstance(name_or_type, str):
            name = name_or_type
        else:
            name, required_type = None, name_or_type

        try:
            if name is None:
                return self.container.get_bean_of_type(required_type)
            return self.container.get_bean(name, required_type)
        except ConfigurationError as e:
            type_name = getattr(required_type, "__qualname__", required_type)
            if name is None:
                logger.warning("No such bean", type=type_name)
            else:
                logger.warning("No such bean", bean=name, type=type_name)
            raise ConfigurationError(
                str(e), context={"name": name, "required_type": required_type}
            ) from e

    def contains_bean(self, name: str) -> bool:
        return self.container.contains(name)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def close(self) -> None:
        """Close the container if it was loaded."""
        with self._lock:
            if self._container is not None:
                self._container.close()

    def __enter__(self) -> "ContainerContext":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
