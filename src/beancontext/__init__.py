"""
beancontext - property and bean lookup over a lazily built container.

A context merges process environment variables over properties read from
``.properties``, ``.env``, YAML or JSON resources, and hands out beans from a
container described by a YAML/JSON definition file.

Quick Start:
    >>> from beancontext import ContainerContext
    >>>
    >>> ctx = ContainerContext(
    ...     "conf/beans.yaml",
    ...     ["app.properties", "classpath:myapp.conf/defaults.yaml"],
    ... )
    >>> ctx.get_property("datastore.url", "sqlite://")
    >>> store = ctx.get_bean("datastore", Datastore)

Command line:
    $ beancontext --config conf/beans.yaml --properties app.properties get datastore.url
    $ beancontext --config conf/beans.yaml keys

Configuration:
    - BCTX_CONFIG_LOCATION=conf/beans.yaml
    - BCTX_PROPERTY_LOCATIONS=app.properties,local.env
    - BCTX_OBSERVABILITY__LOG_LEVEL=INFO
"""

__version__ = "1.0.0"

from .config.container import Container
from .config.settings import Settings, get_settings
from .context import ContainerContext, Context
from .exceptions import ConfigurationError

__all__ = [
    "Context",
    "ContainerContext",
    "Container",
    "ConfigurationError",
    "Settings",
    "get_settings",
]
