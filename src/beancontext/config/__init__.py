"""Container, resources, property readers and settings."""

from .container import Container
from .definitions import BeanDefinition, ContainerDefinition, load_container
from .properties import load_properties, parse_properties
from .resources import Resource
from .settings import Settings, get_settings

__all__ = [
    "Container",
    "BeanDefinition",
    "ContainerDefinition",
    "load_container",
    "Resource",
    "load_properties",
    "parse_properties",
    "Settings",
    "get_settings",
]
