# SPDX-License-Identifier: MIT
"""Toolkit definitions (GNU windres, MSVC rc.exe)."""

from pwinres.toolkits.base import BaseToolkit, LinkReport, toolkit_registry
from pwinres.toolkits.gnu import GnuToolkit
from pwinres.toolkits.locator import (
    Locator,
    RegistryLocator,
    SearchPathLocator,
    default_toolkit_path,
    locator_for,
)
from pwinres.toolkits.msvc import MsvcToolkit


def get_toolkit(name: str) -> BaseToolkit:
    """Return the toolkit registered under name (or an alias).

    Raises:
        ConfigureError: If the name is not recognized.
    """
    return toolkit_registry.create(name)


__all__ = [
    "BaseToolkit",
    "LinkReport",
    "toolkit_registry",
    "get_toolkit",
    # Toolkits
    "GnuToolkit",
    "MsvcToolkit",
    # Discovery
    "Locator",
    "RegistryLocator",
    "SearchPathLocator",
    "default_toolkit_path",
    "locator_for",
]
