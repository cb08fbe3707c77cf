"""Config resolvers: ``(source, section, field) -> str | None``.

The gateway never reads configuration files itself. It asks a resolver for
one field at a time and treats ``None`` as "absent", applying its own
defaults (e.g. Oracle port 1521) only where documented.

Two implementations ship with sqlgate:

``XmlConfigResolver``
    Reads SysInfo-style XML files::

        <SysInfo>
          <SystemInfo><DBSection>MainDB</DBSection></SystemInfo>
          <MainDB>
            <DBIP>10.0.0.7</DBIP><DBName>Sales</DBName>
            <UID>app</UID><PWD>secret</PWD>
          </MainDB>
          <OracleConnection>
            <DBIP>10.0.0.5</DBIP><DBName>ORCL</DBName>
            <UID>app</UID><PWD>secret</PWD><Port>1521</Port>
          </OracleConnection>
        </SysInfo>

``MappingConfigResolver``
    In-memory sections, for tests and for callers that keep settings
    somewhere else (env, vault, ...).
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Mapping
from os import PathLike
from pathlib import Path
from typing import Protocol, runtime_checkable

from sqlgate.errors import ConfigMissingError, InvalidConfigError
from sqlgate.logging import get_logger

logger = get_logger(__name__)


@runtime_checkable
class ConfigResolver(Protocol):
    """Key-value lookup consumed by the connection factory."""

    def lookup(self, source: str, section: str, field: str) -> str | None:
        """Return the field's value, or None when section or field is absent."""
        ...


class XmlConfigResolver:
    """Resolve fields from an XML config file.

    The section is the first element (anywhere in the document) whose tag
    equals the section name; the field is its direct child element of that
    name. Relative sources are resolved against ``base_dir`` (the current
    directory by default).
    """

    def __init__(self, base_dir: str | PathLike[str] | None = None):
        self._base_dir = Path(base_dir) if base_dir is not None else None

    def resolve_path(self, source: str) -> Path:
        path = Path(source)
        if not path.is_absolute() and self._base_dir is not None:
            path = self._base_dir / path
        return path

    def lookup(self, source: str, section: str, field: str) -> str | None:
        path = self.resolve_path(source)
        if not path.is_file():
            raise ConfigMissingError(section, message=f"Error: config source not found: {path}")

        try:
            root = ET.parse(path).getroot()
        except ET.ParseError as e:
            raise InvalidConfigError("config_source", str(path), f"Error: cannot parse {path}: {e}") from e

        section_node = next(root.iter(section), None)
        if section_node is None:
            logger.debug("config_section_missing", source=str(path), section=section)
            return None

        node = section_node.find(field)
        if node is None:
            return None
        return "".join(node.itertext()).strip()


class MappingConfigResolver:
    """Resolve fields from nested mappings.

    ``sections`` answers for every source; ``sources`` (``{source:
    {section: {field: value}}}``) takes precedence for a matching source.
    """

    def __init__(
        self,
        sections: Mapping[str, Mapping[str, str | None]] | None = None,
        sources: Mapping[str, Mapping[str, Mapping[str, str | None]]] | None = None,
    ):
        self._sections = dict(sections or {})
        self._sources = dict(sources or {})

    def lookup(self, source: str, section: str, field: str) -> str | None:
        sections = self._sources.get(source, self._sections)
        values = sections.get(section)
        if values is None:
            return None
        value = values.get(field)
        return None if value is None else str(value)


__all__ = [
    "ConfigResolver",
    "XmlConfigResolver",
    "MappingConfigResolver",
]
