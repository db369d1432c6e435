# SPDX-License-Identifier: MIT
"""Tests for pwinres.toolkits.base and the toolkit registry."""

from __future__ import annotations

import io
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from pwinres.core.errors import CompileError, ConfigureError
from pwinres.toolkits import GnuToolkit, MsvcToolkit, get_toolkit, toolkit_registry
from pwinres.toolkits.base import LinkReport
from pwinres.toolkits.locator import SearchPathLocator


@pytest.fixture
def report(tmp_path) -> LinkReport:
    return LinkReport(
        search_dir=tmp_path,
        lib_name="resource",
        kind="static",
        artifact=tmp_path / "libresource.a",
    )


class TestLinkReport:
    def test_lines(self, report, tmp_path):
        assert report.lines() == [
            f"link-search=native={tmp_path}",
            "link-lib=static=resource",
        ]

    def test_lines_with_prefix(self, report, tmp_path):
        assert report.lines("cargo:rustc-") == [
            f"cargo:rustc-link-search=native={tmp_path}",
            "cargo:rustc-link-lib=static=resource",
        ]

    def test_emit(self, report, tmp_path):
        stream = io.StringIO()
        report.emit(stream)
        assert stream.getvalue() == (
            f"link-search=native={tmp_path}\nlink-lib=static=resource\n"
        )

    def test_emit_prefix_from_environment(self, report, monkeypatch):
        monkeypatch.setenv("PWINRES_REPORT_PREFIX", "build:")
        stream = io.StringIO()
        report.emit(stream)
        assert all(line.startswith("build:link-") for line in stream.getvalue().splitlines())

    def test_emit_stdout(self, report, capsys):
        report.emit()
        assert capsys.readouterr().out.count("\n") == 2


class TestRegistry:
    def test_names(self):
        names = toolkit_registry.names()
        for name in ("gnu", "mingw", "windres", "msvc", "vc", "rc"):
            assert name in names

    @pytest.mark.parametrize("name", ["gnu", "mingw", "windres", "GNU"])
    def test_gnu_aliases(self, name):
        assert isinstance(get_toolkit(name), GnuToolkit)

    @pytest.mark.parametrize("name", ["msvc", "vc", "rc", "MSVC"])
    def test_msvc_aliases(self, name):
        assert isinstance(get_toolkit(name), MsvcToolkit)

    def test_unknown(self):
        with pytest.raises(ConfigureError, match="unknown toolkit 'borland'") as exc:
            get_toolkit("borland")
        assert "gnu" in str(exc.value)
        assert "msvc" in str(exc.value)

    def test_default_locator(self):
        assert isinstance(GnuToolkit().locator(), SearchPathLocator)

    def test_repr(self):
        assert repr(GnuToolkit()) == "GnuToolkit('gnu')"


class TestRunTool:
    @patch(
        "subprocess.run",
        return_value=subprocess.CompletedProcess([], 0, stdout="ok\n", stderr=""),
    )
    def test_success(self, mock_run):
        result = GnuToolkit().run_tool(
            ["windres", Path("a.rc")], what="compile", cwd=Path("/tmp"), capture=True
        )
        assert result.stdout == "ok\n"
        mock_run.assert_called_once_with(
            ["windres", "a.rc"], cwd=Path("/tmp"), capture_output=True, text=True
        )

    @patch(
        "subprocess.run",
        return_value=subprocess.CompletedProcess([], 3, stdout="out ", stderr="err"),
    )
    def test_nonzero_exit(self, mock_run):
        with pytest.raises(CompileError, match="compile failed with exit status 3") as exc:
            GnuToolkit().run_tool(["windres"], what="compile", capture=True)
        assert exc.value.command == ["windres"]
        assert exc.value.returncode == 3
        assert exc.value.output == "out err"

    @patch("subprocess.run", side_effect=PermissionError("denied"))
    def test_cannot_start(self, mock_run):
        with pytest.raises(CompileError, match="could not run windres") as exc:
            GnuToolkit().run_tool(["windres"], what="compile")
        assert exc.value.returncode is None
        assert isinstance(exc.value.__cause__, PermissionError)
