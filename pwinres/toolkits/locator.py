# SPDX-License-Identifier: MIT
"""Toolkit discovery.

Locators return zero or more candidate toolkit directories; the caller
decides which one to use. RegistryLocator finds Windows SDK installations
through the registry, SearchPathLocator performs no discovery and leaves
the executable to the PATH search.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Protocol, runtime_checkable

from pwinres.core.errors import ConfigureError, PwinresError, ToolkitNotFoundError

logger = logging.getLogger(__name__)

INSTALLED_ROOTS_KEY = r"HKLM\SOFTWARE\Microsoft\Windows Kits\Installed Roots"
RC_EXE = "rc.exe"


@runtime_checkable
class Locator(Protocol):
    """Protocol for toolkit locators."""

    def candidates(self) -> list[Path]:
        """Return candidate toolkit directories, least preferred first."""
        ...


def arch_for(pointer_width: int) -> str:
    return "x64" if pointer_width == 64 else "x86"


def _version_key(path: Path) -> list[tuple[int, int | str]]:
    # Numeric ordering for SDK versions like 10.0.9200.0 < 10.0.19041.0
    return [
        (0, int(part)) if part.isdigit() else (1, part)
        for part in path.name.split(".")
    ]


def parse_kits_roots(output: str) -> list[Path]:
    """Extract KitsRoot* values from 'reg query' output.

    Lines are read in reverse, so entries listed last come first.

    Example input line:
        "    KitsRoot10    REG_SZ    C:\\Program Files (x86)\\Windows Kits\\10\\"
    """
    roots: list[Path] = []
    for line in reversed(output.splitlines()):
        if not line.strip().startswith("KitsRoot"):
            continue
        index = line.find("REG_SZ")
        if index < 0:
            logger.debug("Ignoring registry line without REG_SZ: %r", line)
            continue
        value = line[index + len("REG_SZ") :].strip()
        if value:
            roots.append(Path(value))
    return roots


def probe_kit(root: Path, arch: str) -> list[Path]:
    """Return the directories under root holding rc.exe for arch.

    Checks bin/<arch>/rc.exe, then bin/<version>/<arch>/rc.exe for every
    subdirectory of bin in version order.
    """
    found: list[Path] = []
    bin_dir = root / "bin"

    direct = bin_dir / arch / RC_EXE
    if direct.is_file():
        logger.debug("Found %s", direct)
        found.append(direct.parent)

    if not bin_dir.is_dir():
        return found

    for entry in sorted(bin_dir.iterdir(), key=_version_key):
        if not entry.is_dir():
            continue
        rc = entry / arch / RC_EXE
        if rc.is_file():
            logger.debug("Found %s", rc)
            found.append(rc.parent)
    return found


class RegistryLocator:
    """Find Windows SDK bin directories through the registry.

    Uses the 'reg' command, so no Windows-only Python module is needed.
    """

    def __init__(self, pointer_width: int = 64, key: str = INSTALLED_ROOTS_KEY) -> None:
        self.pointer_width = pointer_width
        self.key = key

    @property
    def arch(self) -> str:
        return arch_for(self.pointer_width)

    def query(self) -> str:
        """Run 'reg query' for the installed roots key.

        Raises:
            ToolkitNotFoundError: If reg cannot be run or fails.
        """
        cmd = ["reg", "query", self.key]
        logger.debug("Running: %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise ToolkitNotFoundError(RC_EXE, f"could not query registry: {e}") from e
        if result.returncode != 0:
            detail = (result.stderr or "").strip() or f"exit status {result.returncode}"
            raise ToolkitNotFoundError(RC_EXE, f"registry query failed: {detail}")
        return result.stdout

    def candidates(self) -> list[Path]:
        found: list[Path] = []
        for root in parse_kits_roots(self.query()):
            found.extend(probe_kit(root, self.arch))
        return found

    def find(self) -> list[Path]:
        """Like candidates(), but an empty result is an error.

        Raises:
            ToolkitNotFoundError: If the query fails or nothing is found.
        """
        found = self.candidates()
        if not found:
            raise ToolkitNotFoundError(
                RC_EXE, f"no Windows SDK with {self.arch} binaries is installed"
            )
        return found

    def __repr__(self) -> str:
        return f"RegistryLocator(arch={self.arch!r})"


class SearchPathLocator:
    """No discovery; tools are resolved through PATH when run."""

    def candidates(self) -> list[Path]:
        return []

    def __repr__(self) -> str:
        return "SearchPathLocator()"


def locator_for(toolkit: str, pointer_width: int = 64) -> Locator:
    """Return the locator matching a toolkit name.

    Unknown names get a SearchPathLocator; the name is rejected later,
    when compiling.
    """
    from pwinres.toolkits import get_toolkit

    try:
        return get_toolkit(toolkit).locator(pointer_width)
    except ConfigureError:
        return SearchPathLocator()


def default_toolkit_path(locator: Locator) -> Path | None:
    """Pick the default toolkit directory: the last candidate.

    Returns None when the locator fails or finds nothing; both cases are
    logged, not raised.
    """
    try:
        found = locator.candidates()
    except PwinresError as e:
        logger.warning("Toolkit lookup failed: %s", e)
        return None
    if not found:
        if isinstance(locator, RegistryLocator):
            logger.info("%r found no toolkit; set the toolkit path explicitly", locator)
        else:
            logger.debug("%r: tools are resolved through PATH", locator)
        return None
    return found[-1]
