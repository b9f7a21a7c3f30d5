"""
Declarative container definitions.

A definition file is YAML (or JSON) shaped like::

    imports:
      - datastore.yaml
    beans:
      timeout:
        class: datetime:timedelta
        kwargs: {seconds: 30}
      client:
        factory: myapp.clients:build_client
        args: [{ref: timeout}]
        scope: prototype

Argument values are literals, or ``{ref: <bean name>}`` to inject another bean.
"""

import importlib
from functools import partial
from typing import Any, Literal, get_type_hints

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ..exceptions import ConfigurationError, DefinitionError, ResourceError
from ..observability.logging import get_logger
from .container import PROTOTYPE, SINGLETON, Container
from .resources import Resource

logger = get_logger(__name__)


class BeanDefinition(BaseModel):
    """How to build one named bean."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    class_path: str | None = Field(None, alias="class")
    factory: str | None = None
    args: list[Any] = Field(default_factory=list)
    kwargs: dict[str, Any] = Field(default_factory=dict)
    scope: Literal["singleton", "prototype"] = SINGLETON
    lazy: bool = False
    close_method: str | None = "close"

    @model_validator(mode="after")
    def check_target(self):
        if (self.class_path is None) == (self.factory is None):
            raise ValueError("exactly one of 'class' or 'factory' is required")
        return self

    @property
    def target(self) -> str:
        return self.class_path or self.factory


class ContainerDefinition(BaseModel):
    """Top level of a definition file."""

    model_config = ConfigDict(extra="forbid")

    imports: list[str] = Field(default_factory=list)
    beans: dict[str, BeanDefinition] = Field(default_factory=dict)


def import_object(path: str) -> Any:
    """Import ``module:attr`` or ``module.attr`` (attr may be dotted after ``:``)."""
    if ":" in path:
        module_name, _, attr_path = path.partition(":")
    else:
        module_name, _, attr_path = path.rpartition(".")
    if not module_name or not attr_path:
        raise DefinitionError(f"invalid import path: '{path}'")
    try:
        obj = importlib.import_module(module_name)
        for attr in attr_path.split("."):
            obj = getattr(obj, attr)
    except (ImportError, AttributeError) as e:
        raise DefinitionError(f"cannot import '{path}': {e}", context={"path": path}) from e
    except Exception as e:
        # Module-level code of the target failed while importing
        raise DefinitionError(
            f"error importing '{path}': {type(e).__name__}: {e}", context={"path": path}
        ) from e
    return obj


def _is_ref(value: Any) -> bool:
    return isinstance(value, dict) and set(value) == {"ref"} and isinstance(value["ref"], str)


def _resolve(value: Any, container: Container) -> Any:
    if _is_ref(value):
        return container.get_bean(value["ref"])
    if isinstance(value, list):
        return [_resolve(item, container) for item in value]
    if isinstance(value, dict):
        return {key: _resolve(item, container) for key, item in value.items()}
    return value


def _build(target: Any, definition: BeanDefinition, container: Container) -> Any:
    args = [_resolve(arg, container) for arg in definition.args]
    kwargs = {key: _resolve(value, container) for key, value in definition.kwargs.items()}
    return target(*args, **kwargs)


def _read_definition(resource: Resource) -> ContainerDefinition:
    if not resource.exists():
        raise DefinitionError(
            f"container definition not found: {resource.description}",
            context={"location": resource.location},
        )
    try:
        data = yaml.safe_load(resource.read_text()) or {}
    except yaml.YAMLError as e:
        raise DefinitionError(f"invalid container definition {resource.description}: {e}") from e
    try:
        return ContainerDefinition.model_validate(data)
    except ValidationError as e:
        raise DefinitionError(f"invalid container definition {resource.description}: {e}") from e


def collect_definitions(
    resource: Resource, _seen: set[str] | None = None
) -> dict[str, BeanDefinition]:
    """Read ``resource`` and its imports; later definitions override earlier ones."""
    seen = _seen if _seen is not None else set()
    key = str(resource.path.resolve()) if resource.path is not None else resource.description
    if key in seen:
        return {}
    seen.add(key)

    definition = _read_definition(resource)
    beans: dict[str, BeanDefinition] = {}
    for location in definition.imports:
        try:
            imported = resource.relative(location)
        except ResourceError as e:
            raise DefinitionError(f"invalid import '{location}' in {key}: {e}") from e
        beans.update(collect_definitions(imported, seen))
    beans.update(definition.beans)
    return beans


def declared_type(target: Any) -> type | None:
    """The type a class or annotated factory function produces, if it is known."""
    if isinstance(target, type):
        return target
    try:
        hints = get_type_hints(target)
    except (NameError, TypeError):
        return None
    produced = hints.get("return")
    return produced if isinstance(produced, type) else None


def register_definitions(container: Container, beans: dict[str, BeanDefinition]) -> None:
    for name, definition in beans.items():
        target = import_object(definition.target)
        if not callable(target):
            raise DefinitionError(f"bean '{name}': '{definition.target}' is not callable")
        if definition.class_path and not isinstance(target, type):
            raise DefinitionError(f"bean '{name}': '{definition.target}' is not a class")
        container.register_factory(
            name,
            partial(_build, target, definition),
            bean_type=declared_type(target),
            singleton=definition.scope != PROTOTYPE,
            lazy=definition.lazy,
            close_method=definition.close_method,
            description=definition.target,
        )


def load_container(location: str | Resource) -> Container:
    """Build a container from a definition file and create its eager singletons."""
    resource = location if isinstance(location, Resource) else Resource.from_location(location)
    beans = collect_definitions(resource)

    container = Container(resource=resource)
    register_definitions(container, beans)
    try:
        container.preinstantiate_singletons()
    except ConfigurationError:
        container.close()
        raise

    logger.info(
        "Container loaded",
        location=resource.location,
        beans=len(beans),
    )
    return container
