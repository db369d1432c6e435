# SPDX-License-Identifier: MIT
"""Custom exceptions for pwinres.

All pwinres exceptions inherit from PwinresError. Failures while writing
the resource file are not wrapped and propagate as OSError.
"""

from __future__ import annotations

from collections.abc import Sequence


class PwinresError(Exception):
    """Base class for all pwinres exceptions.

    Attributes:
        message: The error message.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigureError(PwinresError):
    """Invalid or missing configuration.

    Raised when build metadata is missing, pyproject.toml cannot be read,
    or the toolkit identifier is not recognized.
    """


class ToolkitNotFoundError(ConfigureError):
    """No usable toolkit installation was found.

    Attributes:
        tool: What was looked for (e.g. 'rc.exe').
    """

    def __init__(self, tool: str, detail: str | None = None) -> None:
        self.tool = tool
        message = f"toolkit not found: {tool}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class CompileError(PwinresError):
    """An external compiler or archiver failed.

    Attributes:
        command: The command line that was run.
        returncode: Exit status, or None if the process could not start.
        output: Captured output, if any.
    """

    def __init__(
        self,
        message: str,
        command: Sequence[str],
        returncode: int | None = None,
        output: str = "",
    ) -> None:
        self.command = list(command)
        self.returncode = returncode
        self.output = output
        super().__init__(message)
