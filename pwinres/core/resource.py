# SPDX-License-Identifier: MIT
"""The Windows resource descriptor.

A WindowsResource holds everything that goes into the generated resource
file: string-table properties, numeric version fields, icons, the
manifest and toolkit settings. It is immutable; every with_*() step
returns a new descriptor, so configurations can be chained and shared
without aliasing:

    res = (
        WindowsResource.new()
        .with_icon("app.ico")
        .with_property("InternalName", "APP.EXE")
        .with_version_info(VersionInfo.PRODUCTVERSION, 0x0001000000000000)
    )
    res.compile()
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, TextIO

from pwinres.configure.environment import BuildEnvironment
from pwinres.configure.metadata import PackageMetadata

if TYPE_CHECKING:
    from pwinres.toolkits.base import LinkReport
    from pwinres.toolkits.locator import Locator

DEFAULT_ICON_ID = "1"

# VOS_NT_WINDOWS32
VOS_NT_WINDOWS32 = 0x00040004
# VFT_APP / VFT_DLL
VFT_APP = 0x1
VFT_DLL = 0x2
VFT2_UNKNOWN = 0x0
# VS_FFI_FILEFLAGSMASK
VS_FFI_FILEFLAGSMASK = 0x3F


class VersionInfo(enum.Enum):
    """Numeric VERSIONINFO fields, in the order they are written."""

    # Four 16 bit words: MAJOR << 48 | MINOR << 32 | PATCH << 16 | RELEASE
    FILEVERSION = "FILEVERSION"
    PRODUCTVERSION = "PRODUCTVERSION"
    # Should be Windows NT Win32 (0x40004)
    FILEOS = "FILEOS"
    # 1 for an EXE, 2 for a DLL
    FILETYPE = "FILETYPE"
    # Only for drivers and fonts
    FILESUBTYPE = "FILESUBTYPE"
    FILEFLAGSMASK = "FILEFLAGSMASK"
    # Only the bits set in FILEFLAGSMASK are read
    FILEFLAGS = "FILEFLAGS"

    @property
    def is_packed_version(self) -> bool:
        return self in (VersionInfo.FILEVERSION, VersionInfo.PRODUCTVERSION)


def pack_version(major: int, minor: int, patch: int, release: int = 0) -> int:
    """Pack four version components into a 64-bit VERSIONINFO value.

    Components are truncated to 16 bits.
    """
    return (
        (major & 0xFFFF) << 48
        | (minor & 0xFFFF) << 32
        | (patch & 0xFFFF) << 16
        | (release & 0xFFFF)
    )


@dataclass(frozen=True)
class Icon:
    """An icon entry.

    Attributes:
        path: Path to the .ico file, absolute or relative to the project.
        name_id: Resource name; a small integer or an identifier string.
    """

    path: str
    name_id: str = DEFAULT_ICON_ID


def _default_version_info(version: int) -> dict[VersionInfo, int]:
    return {
        VersionInfo.FILEVERSION: version,
        VersionInfo.PRODUCTVERSION: version,
        VersionInfo.FILEOS: VOS_NT_WINDOWS32,
        VersionInfo.FILETYPE: VFT_APP,
        VersionInfo.FILESUBTYPE: VFT2_UNKNOWN,
        VersionInfo.FILEFLAGSMASK: VS_FFI_FILEFLAGSMASK,
        VersionInfo.FILEFLAGS: 0,
    }


@dataclass(frozen=True)
class WindowsResource:
    """Description of a Windows resource file and how to compile it.

    Use WindowsResource.new() to get a descriptor seeded from the build
    metadata; the plain constructor gives an empty one. The properties and
    version_info mappings are read-only copies, so descriptors never share
    mutable state.
    """

    properties: Mapping[str, str] = field(default_factory=dict, hash=False)
    version_info: Mapping[VersionInfo, int] = field(
        default_factory=lambda: _default_version_info(0), hash=False
    )
    icons: tuple[Icon, ...] = ()
    language: int = 0
    manifest: str | None = None
    manifest_file: str | None = None
    resource_file: Path | None = None
    append_rc_content: str = ""
    toolkit: str = "gnu"
    toolkit_path: Path | None = None
    windres_path: str = "windres"
    ar_path: str = "ar"
    output_directory: Path = Path(".")
    project_dir: Path = Path(".")
    pointer_width: int = 64
    add_toolkit_include: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))
        object.__setattr__(
            self, "version_info", MappingProxyType(dict(self.version_info))
        )
        object.__setattr__(self, "icons", tuple(self.icons))

    @classmethod
    def new(
        cls,
        env: BuildEnvironment | None = None,
        metadata: PackageMetadata | None = None,
        locator: Locator | None = None,
    ) -> WindowsResource:
        """Create a resource seeded from the build metadata.

        | Field               | Source                 |
        |---------------------|------------------------|
        | `"FileVersion"`     | package version        |
        | `"ProductVersion"`  | package version        |
        | `"ProductName"`     | package name           |
        | `"FileDescription"` | package description    |

        Entries of the [tool.pwinres] table take precedence over these;
        only string values are used.

        | Field           | Value                        |
        |-----------------|------------------------------|
        | `FILEVERSION`   | package version              |
        | `PRODUCTVERSION`| package version              |
        | `FILEOS`        | `VOS_NT_WINDOWS32 (0x40004)` |
        | `FILETYPE`      | `VFT_APP (0x1)`              |
        | `FILESUBTYPE`   | `VFT2_UNKNOWN (0x0)`         |
        | `FILEFLAGSMASK` | `VS_FFI_FILEFLAGSMASK (0x3F)`|
        | `FILEFLAGS`     | `0x0`                        |

        The language is neutral and no icon is set. The toolkit path is
        taken from env, or else looked up with the locator matching the
        target toolkit; a failed lookup leaves it unset.

        Args:
            env: Build environment (default: from PWINRES_* variables).
            metadata: Package metadata (default: the project's pyproject.toml,
                or PWINRES_PKG_* without one).
            locator: Toolkit locator (default: chosen by env.toolkit).

        Raises:
            ConfigureError: If env or metadata cannot be built from the
                environment.
        """
        from pwinres.toolkits.locator import default_toolkit_path, locator_for

        if env is None:
            env = BuildEnvironment.from_environ()
        if metadata is None:
            metadata = PackageMetadata.for_project(env.project_dir)

        properties = {
            "FileVersion": metadata.version,
            "ProductVersion": metadata.version,
            "ProductName": metadata.name,
            "FileDescription": metadata.description,
        }
        properties.update(metadata.string_overrides())

        major, minor, patch = metadata.version_tuple

        toolkit_path = env.toolkit_path
        if toolkit_path is None:
            if locator is None:
                locator = locator_for(env.toolkit, env.pointer_width)
            toolkit_path = default_toolkit_path(locator)

        return cls(
            properties=properties,
            version_info=_default_version_info(pack_version(major, minor, patch)),
            toolkit=env.toolkit,
            toolkit_path=toolkit_path,
            windres_path=env.windres,
            ar_path=env.ar,
            output_directory=env.out_dir,
            project_dir=env.project_dir,
            pointer_width=env.pointer_width,
        )

    # =========================================================================
    # Configuration
    # =========================================================================

    def with_property(self, name: str, value: str) -> WindowsResource:
        """Set a string property of the version info.

        Well-known names are "FileVersion", "FileDescription",
        "ProductVersion", "ProductName", "OriginalFilename",
        "LegalCopyright", "LegalTrademarks", "CompanyName", "Comments" and
        "InternalName". "PrivateBuild" and "SpecialBuild" should only be
        set together with VS_FF_PRIVATEBUILD (0x08) or VS_FF_SPECIALBUILD
        (0x20) in FILEFLAGS. Other names are allowed but Explorer may not
        show them.
        """
        return replace(self, properties={**self.properties, name: value})

    def with_toolkit(self, toolkit: str) -> WindowsResource:
        """Select the toolkit used by compile() ('gnu' or 'msvc')."""
        return replace(self, toolkit=toolkit.lower())

    def with_toolkit_path(self, path: Path | str) -> WindowsResource:
        r"""Set the toolkit directory.

        For GNU this is the directory holding windres and ar, e.g.
        "C:\mingw64\bin". For MSVC it is the Windows SDK root, e.g.
        "C:\Program Files (x86)\Windows Kits\10", or directly a bin
        directory such as "...\10\bin\10.0.19041.0\x64".
        """
        return replace(self, toolkit_path=Path(path))

    def with_language(self, language: int) -> WindowsResource:
        """Set the user interface language (see pwinres.util.lang)."""
        return replace(self, language=language & 0xFFFF)

    def with_icon(self, path: str) -> WindowsResource:
        """Add an icon with the default name id "1".

        The icon is the application icon when it has the lowest id.
        """
        return self.with_icon_id(path, DEFAULT_ICON_ID)

    def with_icon_id(self, path: str, name_id: str | int) -> WindowsResource:
        """Add an icon with an explicit name id.

        Ids are not checked for duplicates; the resource compiler
        rejects those.
        """
        return replace(self, icons=(*self.icons, Icon(str(path), str(name_id))))

    def with_version_info(self, info: VersionInfo, value: int) -> WindowsResource:
        """Set a numeric version field."""
        return replace(
            self,
            version_info={**self.version_info, info: value & 0xFFFFFFFFFFFFFFFF},
        )

    def with_version(
        self, major: int, minor: int, patch: int, release: int = 0
    ) -> WindowsResource:
        """Set FILEVERSION and PRODUCTVERSION from components."""
        packed = pack_version(major, minor, patch, release)
        return self.with_version_info(VersionInfo.FILEVERSION, packed).with_version_info(
            VersionInfo.PRODUCTVERSION, packed
        )

    def with_manifest(self, manifest: str) -> WindowsResource:
        """Embed a manifest given as text. Clears any manifest file."""
        return replace(self, manifest=manifest, manifest_file=None)

    def with_manifest_file(self, path: str) -> WindowsResource:
        """Embed a manifest file, read by the resource compiler itself.

        Clears any inline manifest.
        """
        return replace(self, manifest=None, manifest_file=str(path))

    def with_resource_file(self, path: Path | str) -> WindowsResource:
        """Compile an existing resource file instead of a generated one.

        The file is neither parsed nor modified.
        """
        return replace(self, resource_file=Path(path))

    def with_output_directory(self, path: Path | str) -> WindowsResource:
        return replace(self, output_directory=Path(path))

    def with_windres_path(self, path: str) -> WindowsResource:
        """Set the GNU resource compiler executable (default 'windres')."""
        return replace(self, windres_path=str(path))

    def with_ar_path(self, path: str) -> WindowsResource:
        """Set the GNU archiver executable (default 'ar')."""
        return replace(self, ar_path=str(path))

    def with_add_toolkit_include(self, add: bool) -> WindowsResource:
        """Pass the SDK's um and shared include directories to rc.exe."""
        return replace(self, add_toolkit_include=add)

    def with_append_rc_content(self, content: str) -> WindowsResource:
        """Append raw text to the end of the generated resource file.

        Successive calls accumulate, one per line.
        """
        if self.append_rc_content:
            content = f"{self.append_rc_content}\n{content}"
        return replace(self, append_rc_content=content)

    # =========================================================================
    # Output
    # =========================================================================

    def render(self) -> str:
        """Return the resource-definition text for this descriptor."""
        from pwinres.core.rcfile import render

        return render(self)

    def write_resource_file(self, path: Path | str) -> Path:
        """Write the resource-definition text to path.

        Raises:
            OSError: If the file cannot be written.
        """
        from pwinres.core.rcfile import write_resource_file

        return write_resource_file(self, path)

    def compile(
        self, stream: TextIO | None = None, prefix: str | None = None
    ) -> LinkReport:
        """Generate the resource file and run the resource compiler.

        Writes <output_directory>/resource.rc unless a resource file was
        set, compiles it with the selected toolkit and emits the link
        report for the calling build on stream (default stdout).

        Raises:
            ConfigureError: If the toolkit is not recognized.
            CompileError: If the compiler or archiver fails.
            OSError: If the resource file cannot be written.
        """
        from pwinres.toolkits import get_toolkit

        toolkit = get_toolkit(self.toolkit)

        if self.resource_file is None:
            rc_file = self.write_resource_file(
                Path(self.output_directory) / "resource.rc"
            )
        else:
            rc_file = self.resource_file

        report = toolkit.compile_resource(self, rc_file)
        report.emit(stream, prefix)
        return report
