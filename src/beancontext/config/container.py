"""
Dependency injection container for named beans.

- Named factories and pre-built singletons
- Lazy or eager singleton creation, prototype scope on request
- Lookup by name (optionally type-checked) or by unique type
- Resource resolution relative to the definition file
- Close hooks for created singletons, run in reverse creation order
"""

import threading
from collections.abc import Callable
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, TypeVar

from ..exceptions import BeanCreationError, BeanTypeError, NoSuchBeanError, NoUniqueBeanError
from ..observability.logging import get_logger
from .resources import Resource

logger = get_logger(__name__)

T = TypeVar("T")

SINGLETON = "singleton"
PROTOTYPE = "prototype"


@dataclass
class _Registration:
    factory: Callable[["Container"], Any]
    bean_type: type | None = None
    singleton: bool = True
    lazy: bool = True
    close_method: str | None = "close"
    description: str = ""


def _check_type(required_type: Any) -> None:
    """Reject anything ``isinstance``/``issubclass`` cannot check against."""
    try:
        if isinstance(required_type, type):
            issubclass(object, required_type)
            return
    except TypeError as e:
        raise BeanTypeError(
            f"Required type {required_type!r} cannot be used for bean lookup: {e}",
            context={"required_type": required_type},
        ) from e
    raise BeanTypeError(
        f"Required type {required_type!r} is not a class",
        context={"required_type": required_type},
    )


class Container:
    """Dependency injection container with singleton lifecycle management."""

    def __init__(self, resource: Resource | None = None):
        # Definition file this container was loaded from, if any
        self.resource = resource
        self._registrations: dict[str, _Registration] = {}
        self._singletons: dict[str, Any] = {}
        # Names in creation order, for close()
        self._created: list[str] = []
        self._currently_creating: set[str] = set()
        self._lock = threading.RLock()
        self._closed = False

    def register_factory(
        self,
        name: str,
        factory: Callable[["Container"], Any],
        bean_type: type | None = None,
        singleton: bool = True,
        lazy: bool = True,
        close_method: str | None = "close",
        description: str | None = None,
    ) -> None:
        """Register a factory function for a bean. The factory receives the container."""
        with self._lock:
            self._singletons.pop(name, None)
            self._registrations[name] = _Registration(
                factory=factory,
                bean_type=bean_type,
                singleton=singleton,
                lazy=lazy,
                close_method=close_method,
                description=description or getattr(factory, "__qualname__", repr(factory)),
            )

    def register_singleton(self, name: str, instance: Any) -> None:
        """Register a singleton instance."""
        with self._lock:
            self._registrations.pop(name, None)
            self._singletons[name] = instance

    def contains(self, name: str) -> bool:
        return name in self._singletons or name in self._registrations

    def __contains__(self, name: str) -> bool:
        return self.contains(name)

    def bean_names(self) -> list[str]:
        names = list(self._registrations)
        names.extend(n for n in self._singletons if n not in self._registrations)
        return names

    def get(self, name: str, default: Any = None) -> Any:
        """Get a bean by name, or ``default`` if there is none."""
        if not self.contains(name):
            return default
        return self.get_bean(name)

    def get_bean(self, name: str, required_type: type[T] | None = None) -> T:
        """Get a bean by name, checking it against ``required_type`` if given."""
        if required_type is not None:
            _check_type(required_type)
        with self._lock:
            if name in self._singletons:
                bean = self._singletons[name]
            elif name in self._registrations:
                bean = self._create(name, self._registrations[name])
            else:
                raise NoSuchBeanError(
                    f"No bean named '{name}' is defined", context={"name": name}
                )

        if required_type is not None and not isinstance(bean, required_type):
            raise BeanTypeError(
                f"Bean named '{name}' is expected to be of type "
                f"'{required_type.__qualname__}' but was '{type(bean).__qualname__}'",
                context={"name": name, "required_type": required_type},
            )
        return bean

    def _matches(self, name: str, required_type: type) -> bool:
        if name in self._singletons:
            return isinstance(self._singletons[name], required_type)
        bean_type = self._registrations[name].bean_type
        return isinstance(bean_type, type) and issubclass(bean_type, required_type)

    def bean_names_for_type(self, required_type: type) -> list[str]:
        _check_type(required_type)
        return [name for name in self.bean_names() if self._matches(name, required_type)]

    def get_bean_of_type(self, required_type: type[T]) -> T:
        """Get the one bean whose type matches ``required_type``."""
        names = self.bean_names_for_type(required_type)
        if not names:
            raise NoSuchBeanError(
                f"No bean of type '{required_type.__qualname__}' is defined",
                context={"required_type": required_type},
            )
        if len(names) > 1:
            raise NoUniqueBeanError(
                f"Expected a single bean of type '{required_type.__qualname__}' "
                f"but found {len(names)}: {', '.join(names)}",
                context={"required_type": required_type, "names": names},
            )
        return self.get_bean(names[0], required_type)

    def _create(self, name: str, registration: _Registration) -> Any:
        if name in self._currently_creating:
            raise BeanCreationError(
                f"Bean '{name}' is currently in creation: circular reference",
                context={"name": name},
            )
        self._currently_creating.add(name)
        try:
            bean = registration.factory(self)
        except BeanCreationError:
            raise
        except Exception as e:
            raise BeanCreationError(
                f"Error creating bean '{name}' with {registration.description}: {e}",
                context={"name": name},
            ) from e
        finally:
            self._currently_creating.discard(name)

        if registration.singleton:
            self._singletons[name] = bean
            self._created.append(name)
            logger.debug("Created singleton bean", bean=name)
        return bean

    def preinstantiate_singletons(self) -> None:
        """Create every non-lazy singleton that has not been created yet."""
        with self._lock:
            for name, registration in list(self._registrations.items()):
                if registration.singleton and not registration.lazy and name not in self._singletons:
                    self._create(name, registration)

    def get_resource(self, location: str) -> Resource:
        """Resolve ``location`` relative to this container's definition file."""
        if self.resource is not None:
            return self.resource.relative(location)
        return Resource.from_location(location)

    def close(self) -> None:
        """Close created singletons in reverse creation order."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            for name in reversed(self._created):
                registration = self._registrations.get(name)
                method_name = registration.close_method if registration else None
                bean = self._singletons.get(name)
                method = getattr(bean, method_name, None) if method_name else None
                if not callable(method):
                    continue
                try:
                    method()
                except Exception as e:
                    # Log error but continue cleanup
                    logger.error("Error closing bean", bean=name, error=str(e))
            self._created.clear()

    @contextmanager
    def lifespan(self):
        """Context manager for container lifecycle."""
        try:
            yield self
        finally:
            self.close()
