# SPDX-License-Identifier: MIT
"""
Pwinres: generate and compile Windows resources at build time.

Pwinres writes a resource-definition (.rc) file with version info, icons
and a manifest, compiles it with GNU windres or MSVC rc.exe, and tells the
calling build where to find the result.
"""

from __future__ import annotations

from pwinres.configure.environment import BuildEnvironment, get_var
from pwinres.configure.metadata import PackageMetadata
from pwinres.core.errors import (
    CompileError,
    ConfigureError,
    PwinresError,
    ToolkitNotFoundError,
)
from pwinres.core.resource import Icon, VersionInfo, WindowsResource, pack_version
from pwinres.toolkits import LinkReport, get_toolkit
from pwinres.util.lang import make_lang_id

__version__ = "0.1.0"

# Public API exports
__all__ = [
    # Version
    "__version__",
    # Build variable access
    "get_var",
    # Configuration records
    "BuildEnvironment",
    "PackageMetadata",
    # Core classes
    "Icon",
    "VersionInfo",
    "WindowsResource",
    "pack_version",
    "make_lang_id",
    # Toolkits
    "LinkReport",
    "get_toolkit",
    # Errors
    "PwinresError",
    "ConfigureError",
    "ToolkitNotFoundError",
    "CompileError",
]
