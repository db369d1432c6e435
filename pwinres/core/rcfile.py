# SPDX-License-Identifier: MIT
"""Resource-definition (.rc) file writer.

The output is accepted by both rc.exe and GNU windres. It uses constants
instead of winver.h macros, so no include is needed, and declares UTF-8
as its code page.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from pwinres.core.resource import VersionInfo

if TYPE_CHECKING:
    from pwinres.core.resource import WindowsResource

CODE_PAGE = 65001
# Unicode code page used in the StringFileInfo block key and Translation
UNICODE_CODEPAGE = 0x04B0
# RT_MANIFEST
MANIFEST_TYPE = 24

_ESCAPES = {
    '"': '""',
    "\\": "\\\\",
    "'": "\\'",
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
}


def escape_string(value: str) -> str:
    """Escape a string for use inside a quoted .rc string literal.

    Double quotes are doubled; backslash, single quote, newline, tab and
    carriage return get C-style escapes. Everything else is unchanged.
    """
    return "".join(_ESCAPES.get(ch, ch) for ch in value)


def _version_line(info: VersionInfo, value: int) -> str:
    if info.is_packed_version:
        words = [(value >> shift) & 0xFFFF for shift in (48, 32, 16, 0)]
        return f"{info.value} {words[0]}, {words[1]}, {words[2]}, {words[3]}"
    return f"{info.value} {value:#x}"


def render_lines(resource: WindowsResource) -> list[str]:
    """Return the lines of the resource-definition text."""
    lines = [f"#pragma code_page({CODE_PAGE})", "1 VERSIONINFO"]

    for info in VersionInfo:
        if info in resource.version_info:
            lines.append(_version_line(info, resource.version_info[info]))

    lines.append("{")
    lines.append('BLOCK "StringFileInfo"')
    lines.append("{")
    lines.append(f'BLOCK "{resource.language:04x}{UNICODE_CODEPAGE:04x}"')
    lines.append("{")
    for name, value in resource.properties.items():
        if value:
            lines.append(f'VALUE "{escape_string(name)}", "{escape_string(value)}"')
    lines.append("}")
    lines.append("}")

    lines.append('BLOCK "VarFileInfo" {')
    lines.append(
        f'VALUE "Translation", {resource.language:#x}, {UNICODE_CODEPAGE:#x}'
    )
    lines.append("}")
    lines.append("}")

    for icon in resource.icons:
        lines.append(f'{escape_string(icon.name_id)} ICON "{escape_string(icon.path)}"')

    # The manifest id follows FILETYPE: 1 for applications, 2 for DLLs
    file_type = resource.version_info.get(VersionInfo.FILETYPE)
    if file_type is not None:
        if resource.manifest is not None:
            lines.append(f"{file_type} {MANIFEST_TYPE}")
            lines.append("{")
            for line in resource.manifest.splitlines():
                # Padded so adjacent lines don't fuse when concatenated
                lines.append(f'" {escape_string(line.strip())} "')
            lines.append("}")
        elif resource.manifest_file is not None:
            lines.append(
                f'{file_type} {MANIFEST_TYPE} "{escape_string(resource.manifest_file)}"'
            )

    if resource.append_rc_content:
        lines.append(resource.append_rc_content)

    return lines


def render(resource: WindowsResource) -> str:
    """Render a resource descriptor as resource-definition text."""
    return "\n".join(render_lines(resource)) + "\n"


def write_resource_file(resource: WindowsResource, path: Path | str) -> Path:
    """Write the rendered resource to path as UTF-8.

    Parent directories are created as needed.

    Returns:
        The path written.

    Raises:
        OSError: If the file cannot be written. A partially written file
            is left in place.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        f.write(render(resource))
    return path
