#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
# /// script
# requires-python = ">=3.11"
# dependencies = ["pwinres"]
# ///
"""Build step: embed version info, an icon and a manifest.

On Windows (or when PWINRES_TOOLKIT is set) the resource is compiled and
the link report is printed. Elsewhere only resource.rc is generated.

Variables:
    PWINRES_OUT_DIR  - Output directory (default: ./build)
    PWINRES_TOOLKIT  - gnu or msvc
"""

import dataclasses
import sys
from pathlib import Path

# Add parent pwinres to path for development
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from pwinres import BuildEnvironment, PackageMetadata, PwinresError, WindowsResource, get_var
from pwinres.util.lang import LANG_ENGLISH, SUBLANG_ENGLISH_US, make_lang_id

source_dir = Path(__file__).parent
out_dir = Path(get_var("PWINRES_OUT_DIR") or source_dir / "build")

env = dataclasses.replace(
    BuildEnvironment.from_environ(), project_dir=source_dir, out_dir=out_dir
)
metadata = PackageMetadata.from_pyproject(source_dir / "pyproject.toml")

res = (
    WindowsResource.new(env, metadata)
    .with_icon("icon.ico")
    .with_language(make_lang_id(LANG_ENGLISH, SUBLANG_ENGLISH_US))
    .with_manifest_file("manifest.xml")
)

if sys.platform != "win32" and not get_var("PWINRES_TOOLKIT"):
    path = res.write_resource_file(out_dir / "resource.rc")
    print(f"Generated {path}")
    sys.exit(0)

try:
    res.compile()
except PwinresError as e:
    print(e, file=sys.stderr)
    sys.exit(1)
