"""
Readers that turn a property resource into a flat ``str -> str`` table.

The reader is picked from the resource suffix:

- ``.env``: dotenv syntax via python-dotenv
- ``.yaml``, ``.yml``, ``.json``: a mapping, nested keys joined with ``.``
- anything else: Java ``.properties`` syntax, decoded as ISO-8859-1
"""

import io
import re
from collections.abc import Mapping

import yaml
from dotenv import dotenv_values

from ..exceptions import PropertiesFormatError
from .resources import Resource

_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_SEPARATORS = "=:"
_WHITESPACE = " \t\f"


def _logical_lines(text: str):
    """Yield logical lines: comments and blanks dropped, continuations joined."""
    pending = None
    for raw in _LINE_BREAK.split(text):
        line = raw.lstrip(_WHITESPACE)
        if pending is None:
            if not line or line[0] in "#!":
                continue
        # An odd number of trailing backslashes continues onto the next line
        trailing = len(line) - len(line.rstrip("\\"))
        continued = trailing % 2 == 1
        if continued:
            line = line[:-1]
        pending = line if pending is None else pending + line
        if not continued:
            yield pending
            pending = None
    if pending is not None:
        yield pending


def _unescape(text: str) -> str:
    out = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch != "\\" or i + 1 >= len(text):
            out.append(ch)
            i += 1
            continue
        nxt = text[i + 1]
        if nxt == "u":
            digits = text[i + 2 : i + 6]
            if len(digits) != 4:
                raise PropertiesFormatError(f"malformed \\u escape: \\u{digits}")
            try:
                out.append(chr(int(digits, 16)))
            except ValueError as e:
                raise PropertiesFormatError(f"malformed \\u escape: \\u{digits}") from e
            i += 6
            continue
        out.append(_ESCAPES.get(nxt, nxt))
        i += 2
    return "".join(out)


def _split_key_value(line: str) -> tuple[str, str]:
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "\\":
            i += 2
            continue
        if ch in _SEPARATORS or ch in _WHITESPACE:
            break
        i += 1
    key = line[:i]
    rest = line[i:].lstrip(_WHITESPACE)
    if rest and rest[0] in _SEPARATORS:
        rest = rest[1:].lstrip(_WHITESPACE)
    return _unescape(key), _unescape(rest)


def parse_properties(text: str) -> dict[str, str]:
    """Parse Java ``.properties`` text. Later duplicates win."""
    table: dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split_key_value(line)
        table[key] = value
    return table


def _to_text(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, list | tuple):
        return ",".join(_to_text(item) for item in value)
    return str(value)


def flatten(data: Mapping, prefix: str = "") -> dict[str, str]:
    """Flatten nested mappings into dotted keys with string values."""
    table: dict[str, str] = {}
    for key, value in data.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            table.update(flatten(value, full_key))
        else:
            table[full_key] = _to_text(value)
    return table


def parse_structured(text: str) -> dict[str, str]:
    """Parse YAML (or JSON, a YAML subset) into a flat property table."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise PropertiesFormatError(f"invalid YAML/JSON properties: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise PropertiesFormatError(
            f"properties document must be a mapping, got {type(data).__name__}"
        )
    return flatten(data)


def parse_dotenv(text: str) -> dict[str, str]:
    values = dotenv_values(stream=io.StringIO(text))
    return {key: value for key, value in values.items() if value is not None}


def load_properties(resource: Resource) -> dict[str, str]:
    """Read ``resource`` and parse it according to its suffix."""
    suffix = resource.suffix
    if suffix in {".yaml", ".yml", ".json"}:
        return parse_structured(resource.read_text())
    if suffix == ".env" or (resource.path is not None and resource.path.name == ".env"):
        return parse_dotenv(resource.read_text())
    return parse_properties(resource.read_text(encoding="latin-1"))
