# SPDX-License-Identifier: MIT
"""Build environment for pwinres.

The BuildEnvironment is the configuration record injected by the calling
build: where to put outputs, which toolkit to target and the target word
size. Values come from build variables, see get_var().
"""

from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from pwinres.core.errors import ConfigureError

# Internal storage for variables passed as JSON
_vars: dict[str, str] | None = None


def get_var(name: str, default: str | None = None) -> str | None:
    """Get a build variable set by the caller or from the environment.

    Variables can be passed as a JSON object in PWINRES_VARS, which is how
    the pwinres CLI forwards them:
        PWINRES_VARS='{"PWINRES_TOOLKIT": "gnu"}'

    Precedence (highest to lowest):
        1. PWINRES_VARS entries
        2. Environment variable: VAR=value

    Args:
        name: Variable name.
        default: Default value if not set.

    Returns:
        The variable value, or default if not set.
    """
    global _vars

    # Lazy-load vars from environment on first access
    if _vars is None:
        raw = os.environ.get("PWINRES_VARS")
        if raw:
            try:
                loaded = json.loads(raw)
            except json.JSONDecodeError:
                loaded = {}
            _vars = loaded if isinstance(loaded, dict) else {}
        else:
            _vars = {}

    if name in _vars:
        return str(_vars[name])

    return os.environ.get(name, default)


def _reset_vars() -> None:
    """Forget cached PWINRES_VARS (used when the environment changes)."""
    global _vars
    _vars = None


def default_toolkit() -> str:
    """Return the toolkit matching the host: msvc on Windows, gnu elsewhere."""
    return "msvc" if sys.platform == "win32" else "gnu"


def host_pointer_width() -> int:
    return 64 if sys.maxsize > 2**32 else 32


@dataclass(frozen=True)
class BuildEnvironment:
    """Configuration injected by the calling build.

    Attributes:
        project_dir: Project root, passed to the compiler as include path.
        out_dir: Directory receiving resource.rc and the compiled artifact.
        toolkit: Target toolkit identifier ('gnu' or 'msvc').
        pointer_width: Target word size in bits (32 or 64).
        windres: GNU resource compiler executable name.
        ar: GNU archiver executable name.
        toolkit_path: Explicit toolkit directory, overriding discovery.
    """

    project_dir: Path = field(default_factory=Path.cwd)
    out_dir: Path = Path(".")
    toolkit: str = field(default_factory=default_toolkit)
    pointer_width: int = field(default_factory=host_pointer_width)
    windres: str = "windres"
    ar: str = "ar"
    toolkit_path: Path | None = None

    @classmethod
    def from_environ(cls) -> BuildEnvironment:
        """Build the record from PWINRES_* build variables.

        Raises:
            ConfigureError: If PWINRES_POINTER_WIDTH is not 32 or 64.
        """
        width_var = get_var("PWINRES_POINTER_WIDTH")
        if width_var is None:
            width = host_pointer_width()
        else:
            try:
                width = int(width_var)
            except ValueError:
                width = 0
            if width not in (32, 64):
                raise ConfigureError(
                    f"PWINRES_POINTER_WIDTH must be 32 or 64, got {width_var!r}"
                )

        toolkit_path = get_var("PWINRES_TOOLKIT_PATH")
        return cls(
            project_dir=Path(get_var("PWINRES_PROJECT_DIR") or Path.cwd()),
            out_dir=Path(get_var("PWINRES_OUT_DIR") or "."),
            toolkit=(get_var("PWINRES_TOOLKIT") or default_toolkit()).lower(),
            pointer_width=width,
            windres=get_var("PWINRES_WINDRES") or "windres",
            ar=get_var("PWINRES_AR") or "ar",
            toolkit_path=Path(toolkit_path) if toolkit_path else None,
        )
