# SPDX-License-Identifier: MIT
"""GNU toolkit: windres and ar.

windres compiles the resource file to a COFF object, which ar packs into
libresource.a so the calling build can link it as a static library. The
toolkit path must match the target word size (MinGW-w64 for 64-bit).
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import TYPE_CHECKING

from pwinres.toolkits.base import RESOURCE_NAME, BaseToolkit, LinkReport

if TYPE_CHECKING:
    from pwinres.core.resource import WindowsResource


class GnuToolkit(BaseToolkit):
    """Compile resources with GNU windres and ar."""

    def __init__(self) -> None:
        super().__init__("gnu")

    def tool_command(self, resource: WindowsResource, tool: str) -> str:
        """Return the command for tool.

        A tool present in the toolkit directory is used from there (with
        or without an .exe suffix), anything else is left to the PATH
        search.
        """
        if resource.toolkit_path is None:
            return tool
        toolkit = Path(resource.toolkit_path)
        found = shutil.which(tool, path=str(toolkit))
        if found:
            return found
        names = [tool] if tool.lower().endswith(".exe") else [tool, f"{tool}.exe"]
        for name in names:
            candidate = toolkit / name
            if candidate.is_file():
                return str(candidate)
        return tool

    def compile_command(
        self, resource: WindowsResource, rc_file: Path, obj_file: Path
    ) -> list[str]:
        return [
            self.tool_command(resource, resource.windres_path),
            f"-I{Path(resource.project_dir).absolute()}",
            str(rc_file),
            str(obj_file),
        ]

    def archive_command(
        self, resource: WindowsResource, obj_file: Path, lib_file: Path
    ) -> list[str]:
        return [
            self.tool_command(resource, resource.ar_path),
            "rsc",
            str(lib_file),
            str(obj_file),
        ]

    def compile_resource(
        self, resource: WindowsResource, rc_file: Path
    ) -> LinkReport:
        output_dir = Path(resource.output_directory).absolute()
        output_dir.mkdir(parents=True, exist_ok=True)
        rc_file = Path(rc_file).absolute()
        obj_file = output_dir / f"{RESOURCE_NAME}.o"
        lib_file = output_dir / f"lib{RESOURCE_NAME}.a"
        cwd = Path(resource.toolkit_path) if resource.toolkit_path else None

        self.run_tool(
            self.compile_command(resource, rc_file, obj_file),
            what="could not compile resource file",
            cwd=cwd,
        )
        self.run_tool(
            self.archive_command(resource, obj_file, lib_file),
            what="could not create static library for resource file",
            cwd=cwd,
        )

        return LinkReport(
            search_dir=output_dir,
            lib_name=RESOURCE_NAME,
            kind="static",
            artifact=lib_file,
        )


# =============================================================================
# Registration
# =============================================================================

from pwinres.toolkits.base import toolkit_registry  # noqa: E402

toolkit_registry.register(GnuToolkit, aliases=["gnu", "mingw", "windres"])
