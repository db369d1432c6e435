# SPDX-License-Identifier: MIT
"""MSVC toolkit: rc.exe from the Windows SDK."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path, PurePath
from typing import TYPE_CHECKING

from pwinres.core.errors import CompileError
from pwinres.toolkits.base import RESOURCE_NAME, BaseToolkit, LinkReport
from pwinres.toolkits.locator import RC_EXE, RegistryLocator, arch_for

if TYPE_CHECKING:
    from pwinres.core.resource import WindowsResource
    from pwinres.toolkits.locator import Locator

logger = logging.getLogger(__name__)


def sdk_include_root(rc_exe: PurePath) -> PurePath | None:
    r"""Derive the SDK include directory from the path of rc.exe.

    The components before 'bin' are kept, 'bin' becomes 'Include', and a
    following '10.*' version directory is kept:

        ...\Windows Kits\10\bin\10.0.19041.0\x64\rc.exe
        -> ...\Windows Kits\10\Include\10.0.19041.0

    Returns None if the path has no 'bin' component.
    """
    parts = rc_exe.parts
    for index, part in enumerate(parts):
        if part.lower() != "bin":
            continue
        root = type(rc_exe)(*parts[:index], "Include")
        if index + 1 < len(parts) and parts[index + 1].startswith("10."):
            root = root / parts[index + 1]
        return root
    return None


class MsvcToolkit(BaseToolkit):
    """Compile resources with the Windows SDK resource compiler.

    rc.exe writes a .res file which the MSVC linker accepts like a
    library, so the report asks for resource.lib to be linked directly.
    """

    def __init__(self) -> None:
        super().__init__("msvc")

    def locator(self, pointer_width: int = 64) -> Locator:
        return RegistryLocator(pointer_width)

    def find_rc_exe(self, resource: WindowsResource) -> Path:
        """Resolve rc.exe in the toolkit directory.

        The toolkit path may point at an SDK bin directory (rc.exe directly
        inside) or at the SDK root (bin/<arch>/rc.exe). Without a toolkit
        path, rc.exe is left to the PATH search.
        """
        if resource.toolkit_path is None:
            return Path(RC_EXE)
        toolkit = Path(resource.toolkit_path)
        rc_exe = toolkit / RC_EXE
        if rc_exe.exists():
            return rc_exe
        return toolkit / "bin" / arch_for(resource.pointer_width) / RC_EXE

    def include_flags(self, resource: WindowsResource, rc_exe: Path) -> list[str]:
        flags = [f"/I{Path(resource.project_dir).absolute()}"]
        if resource.add_toolkit_include:
            root = sdk_include_root(rc_exe)
            if root is None:
                logger.warning("Cannot derive SDK include directory from %s", rc_exe)
            else:
                flags.append(f"/I{root / 'um'}")
                flags.append(f"/I{root / 'shared'}")
        return flags

    def compile_command(
        self, resource: WindowsResource, rc_file: Path, lib_file: Path
    ) -> list[str]:
        rc_exe = self.find_rc_exe(resource)
        return [
            str(rc_exe),
            *self.include_flags(resource, rc_exe),
            f"/fo{lib_file}",
            str(rc_file),
        ]

    def _log_output(self, result: subprocess.CompletedProcess[str]) -> None:
        if result.stdout:
            logger.info("RC output:\n%s", result.stdout.rstrip())
        if result.stderr:
            logger.info("RC error output:\n%s", result.stderr.rstrip())

    def compile_resource(
        self, resource: WindowsResource, rc_file: Path
    ) -> LinkReport:
        output_dir = Path(resource.output_directory).absolute()
        output_dir.mkdir(parents=True, exist_ok=True)
        lib_file = output_dir / f"{RESOURCE_NAME}.lib"

        cmd = self.compile_command(resource, Path(rc_file).absolute(), lib_file)
        try:
            result = self.run_tool(
                cmd, what="could not compile resource file", capture=True
            )
        except CompileError as e:
            if e.output:
                logger.error("RC output:\n%s", e.output.rstrip())
            raise
        self._log_output(result)

        return LinkReport(
            search_dir=output_dir,
            lib_name=RESOURCE_NAME,
            kind="dylib",
            artifact=lib_file,
        )


# =============================================================================
# Registration
# =============================================================================

from pwinres.toolkits.base import toolkit_registry  # noqa: E402

toolkit_registry.register(MsvcToolkit, aliases=["msvc", "vc", "rc"])
