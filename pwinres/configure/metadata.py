# SPDX-License-Identifier: MIT
"""Package metadata for the version resource.

PackageMetadata carries the name, version and description that seed the
version resource, plus the optional [tool.pwinres] table of string-table
overrides. It is read from pyproject.toml or from PWINRES_PKG_* variables.
"""

from __future__ import annotations

import logging
import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pwinres.configure.environment import get_var
from pwinres.core.errors import ConfigureError

logger = logging.getLogger(__name__)

TOOL_TABLE = "pwinres"

_LEADING_INT = re.compile(r"\d+")


def _component(part: str) -> int:
    match = _LEADING_INT.match(part)
    return int(match.group()) if match else 0


def parse_version(version: str) -> tuple[int, int, int]:
    """Split 'major.minor.patch' into integers.

    Each component uses its leading digits; anything unparsable is 0,
    so '1.2.3rc1' gives (1, 2, 3) and '2' gives (2, 0, 0).
    """
    parts = version.strip().split(".")
    parts += ["0"] * (3 - len(parts))
    return _component(parts[0]), _component(parts[1]), _component(parts[2])


@dataclass(frozen=True)
class PackageMetadata:
    """Build metadata injected into the version resource.

    Attributes:
        name: Package name (ProductName).
        version: Version string (FileVersion/ProductVersion).
        description: Package description (FileDescription).
        overrides: String-table overrides, or None if no table exists.
    """

    name: str
    version: str
    description: str = ""
    overrides: dict[str, Any] | None = field(default=None)

    @property
    def version_tuple(self) -> tuple[int, int, int]:
        return parse_version(self.version)

    def string_overrides(self) -> dict[str, str]:
        """Return the override table with non-string entries dropped.

        A missing table and skipped entries are logged, never raised.
        """
        if self.overrides is None:
            logger.debug("tool.%s table does not exist", TOOL_TABLE)
            return {}

        result: dict[str, str] = {}
        for key, value in self.overrides.items():
            if isinstance(value, str):
                result[key] = value
            else:
                logger.warning("tool.%s.%s is not a string, skipping", TOOL_TABLE, key)
        return result

    @classmethod
    def from_pyproject(cls, path: Path | str) -> PackageMetadata:
        """Read [project] and [tool.pwinres] from a pyproject.toml.

        Raises:
            ConfigureError: If the file cannot be read or parsed, or
                [project] lacks a name or version.
        """
        path = Path(path)
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except OSError as e:
            raise ConfigureError(f"cannot read {path}: {e}") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigureError(f"cannot parse {path}: {e}") from e

        project = data.get("project")
        if not isinstance(project, dict):
            raise ConfigureError(f"{path} has no [project] table")

        name = project.get("name")
        version = project.get("version")
        if not isinstance(name, str) or not name:
            raise ConfigureError(f"{path}: project.name is missing")
        if not isinstance(version, str) or not version:
            raise ConfigureError(
                f"{path}: project.version is missing (dynamic versions "
                "are not supported)"
            )

        overrides: dict[str, Any] | None = None
        tool = data.get("tool", {})
        table = tool.get(TOOL_TABLE) if isinstance(tool, dict) else None
        if table is None:
            logger.debug("%s: tool.%s does not exist", path, TOOL_TABLE)
        elif isinstance(table, dict):
            overrides = dict(table)
        else:
            logger.warning("%s: tool.%s is not a table", path, TOOL_TABLE)

        description = project.get("description", "")
        return cls(
            name=name,
            version=version,
            description=description if isinstance(description, str) else "",
            overrides=overrides,
        )

    @classmethod
    def for_project(cls, project_dir: Path | str) -> PackageMetadata:
        """Read project_dir/pyproject.toml, or PWINRES_PKG_* without one.

        Raises:
            ConfigureError: If the chosen source is incomplete or invalid.
        """
        pyproject = Path(project_dir) / "pyproject.toml"
        if pyproject.is_file():
            return cls.from_pyproject(pyproject)
        logger.debug("No %s, using PWINRES_PKG_* variables", pyproject)
        return cls.from_environ()

    @classmethod
    def from_environ(cls) -> PackageMetadata:
        """Read PWINRES_PKG_NAME, PWINRES_PKG_VERSION, PWINRES_PKG_DESCRIPTION.

        Raises:
            ConfigureError: If the name or version is not set.
        """
        name = get_var("PWINRES_PKG_NAME")
        version = get_var("PWINRES_PKG_VERSION")
        if not name:
            raise ConfigureError("PWINRES_PKG_NAME is not set")
        if not version:
            raise ConfigureError("PWINRES_PKG_VERSION is not set")
        return cls(
            name=name,
            version=version,
            description=get_var("PWINRES_PKG_DESCRIPTION", "") or "",
        )
