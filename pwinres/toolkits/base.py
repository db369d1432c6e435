# SPDX-License-Identifier: MIT
"""Toolkit base class, registry and link report.

A Toolkit turns a resource-definition file into something the calling
build can link: GNU windres + ar produce a static library, MSVC rc.exe
produces a .lib passed to the linker directly. Toolkits are selected at
runtime by name through toolkit_registry.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

from pwinres.configure.environment import get_var
from pwinres.core.errors import CompileError, ConfigureError
from pwinres.toolkits.locator import Locator, SearchPathLocator

if TYPE_CHECKING:
    from pwinres.core.resource import WindowsResource

logger = logging.getLogger(__name__)

RESOURCE_NAME = "resource"


@dataclass(frozen=True)
class LinkReport:
    """Where the compiled resource is and how to link it.

    Attributes:
        search_dir: Native library search directory.
        lib_name: Library name without prefix or suffix.
        kind: Link kind, 'static' or 'dylib'.
        artifact: Path of the produced file.
    """

    search_dir: Path
    lib_name: str
    kind: str
    artifact: Path

    def lines(self, prefix: str = "") -> list[str]:
        """Return the two report lines for the calling build."""
        return [
            f"{prefix}link-search=native={self.search_dir}",
            f"{prefix}link-lib={self.kind}={self.lib_name}",
        ]

    def emit(self, stream: TextIO | None = None, prefix: str | None = None) -> None:
        """Write the report lines to stream (default stdout).

        The prefix defaults to the PWINRES_REPORT_PREFIX build variable.
        """
        if stream is None:
            stream = sys.stdout
        if prefix is None:
            prefix = get_var("PWINRES_REPORT_PREFIX", "") or ""
        for line in self.lines(prefix):
            print(line, file=stream)
        stream.flush()


class BaseToolkit(ABC):
    """Abstract base class for toolkits.

    Subclasses implement compile_resource(); run_tool() gives them a
    common way to launch a tool and turn failures into CompileError.
    """

    def __init__(self, name: str) -> None:
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @abstractmethod
    def compile_resource(
        self, resource: WindowsResource, rc_file: Path
    ) -> LinkReport:
        """Compile rc_file into a linkable artifact.

        Args:
            resource: Descriptor providing toolkit settings.
            rc_file: The resource-definition file to compile.

        Returns:
            The link report for the produced artifact.

        Raises:
            CompileError: If a tool cannot be started or fails.
        """
        ...

    def locator(self, pointer_width: int = 64) -> Locator:
        """Return the locator used to find a default toolkit path.

        The default performs no discovery; tools are found through PATH.
        """
        return SearchPathLocator()

    def run_tool(
        self,
        cmd: Sequence[str],
        *,
        what: str,
        cwd: Path | None = None,
        capture: bool = False,
    ) -> subprocess.CompletedProcess[str]:
        """Run a tool and check its exit status.

        Args:
            cmd: Command line.
            what: Short description used in error messages.
            cwd: Working directory for the tool.
            capture: Capture stdout/stderr instead of inheriting them.

        Raises:
            CompileError: If the tool cannot be started or exits non-zero.
        """
        cmd = [str(c) for c in cmd]
        logger.info("Running: %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=capture,
                text=True,
            )
        except OSError as e:
            raise CompileError(f"could not run {cmd[0]}: {e}", cmd) from e

        output = ""
        if capture:
            output = (result.stdout or "") + (result.stderr or "")
        if result.returncode != 0:
            raise CompileError(
                f"{what} failed with exit status {result.returncode}",
                cmd,
                returncode=result.returncode,
                output=output,
            )
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"


class ToolkitRegistry:
    """Maps toolkit names and aliases to toolkit classes."""

    def __init__(self) -> None:
        self._classes: dict[str, type[BaseToolkit]] = {}

    def register(self, cls: type[BaseToolkit], aliases: Sequence[str]) -> None:
        for alias in aliases:
            self._classes[alias.lower()] = cls

    def names(self) -> list[str]:
        return sorted(self._classes)

    def create(self, name: str) -> BaseToolkit:
        """Instantiate the toolkit registered under name.

        Raises:
            ConfigureError: If no toolkit has that name.
        """
        cls = self._classes.get(name.lower())
        if cls is None:
            known = ", ".join(self.names())
            raise ConfigureError(f"unknown toolkit {name!r} (expected one of: {known})")
        return cls()


toolkit_registry = ToolkitRegistry()
