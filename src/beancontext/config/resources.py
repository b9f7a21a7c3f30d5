"""
Resource locations for container definitions and property files.

A location is one of:

- ``classpath:pkg.sub/rel/path`` or ``package:pkg.sub/rel/path``: data shipped
  inside an importable package, read through ``importlib.resources``
- ``file:/abs/path`` or ``file:rel/path``: a filesystem path
- a bare path: a filesystem path, relative to ``base_path`` when one is given
"""

from dataclasses import dataclass
from importlib import resources
from pathlib import Path

from ..exceptions import ResourceError

PACKAGE_PREFIXES = ("classpath:", "package:")
FILE_PREFIX = "file:"


@dataclass(frozen=True)
class Resource:
    """A readable location, either on disk or inside a package."""

    location: str
    path: Path | None = None
    package: str | None = None
    package_path: str | None = None

    @classmethod
    def from_location(cls, location: str, base_path: Path | None = None) -> "Resource":
        if not location or not location.strip():
            raise ResourceError("empty resource location")
        location = location.strip()

        for prefix in PACKAGE_PREFIXES:
            if location.startswith(prefix):
                target = location[len(prefix) :].lstrip("/")
                package, _, rel = target.partition("/")
                if not package or not rel:
                    raise ResourceError(
                        f"package resource must look like '{prefix}pkg/path': {location}",
                        context={"location": location},
                    )
                return cls(location=location, package=package, package_path=rel)

        raw = location[len(FILE_PREFIX) :] if location.startswith(FILE_PREFIX) else location
        path = Path(raw).expanduser()
        if not path.is_absolute() and base_path is not None:
            path = base_path / path
        return cls(location=location, path=path)

    @property
    def is_package_resource(self) -> bool:
        return self.package is not None

    @property
    def suffix(self) -> str:
        name = self.path.name if self.path is not None else self.package_path
        return Path(name).suffix.lower()

    @property
    def description(self) -> str:
        if self.is_package_resource:
            return f"package resource [{self.package}/{self.package_path}]"
        return f"file [{self.path}]"

    @property
    def parent(self) -> Path | None:
        """Directory that relative locations inside this resource resolve against."""
        if self.path is not None:
            return self.path.parent
        return None

    def _traversable(self):
        try:
            root = resources.files(self.package)
        except (ImportError, TypeError):
            return None
        return root.joinpath(*self.package_path.split("/"))

    def exists(self) -> bool:
        if self.is_package_resource:
            target = self._traversable()
            return target is not None and target.is_file()
        return self.path.is_file()

    def read_text(self, encoding: str = "utf-8") -> str:
        """Read the whole resource; raises ``ResourceError`` when it cannot."""
        try:
            if self.is_package_resource:
                target = self._traversable()
                if target is None:
                    raise FileNotFoundError(f"no package named {self.package!r}")
                return target.read_text(encoding=encoding)
            return self.path.read_text(encoding=encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise ResourceError(
                f"cannot read {self.description}: {e}", context={"location": self.location}
            ) from e

    def relative(self, location: str) -> "Resource":
        """Resolve ``location`` next to this resource."""
        if self.is_package_resource and not location.startswith(PACKAGE_PREFIXES + (FILE_PREFIX,)):
            if Path(location).is_absolute():
                return Resource.from_location(location)
            parent = self.package_path.rpartition("/")[0]
            rel = f"{parent}/{location}" if parent else location
            return Resource(location=location, package=self.package, package_path=rel)
        return Resource.from_location(location, base_path=self.parent)

    def __str__(self) -> str:
        return self.description
