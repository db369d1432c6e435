# SPDX-License-Identifier: MIT
"""Tests for pwinres.toolkits.locator."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from pwinres.core.errors import ToolkitNotFoundError
from pwinres.toolkits.locator import (
    Locator,
    RegistryLocator,
    SearchPathLocator,
    default_toolkit_path,
    locator_for,
    parse_kits_roots,
    probe_kit,
)


def make_rc(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    (path / "rc.exe").write_text("")
    return path


def reg_output(*roots: Path) -> str:
    lines = [r"HKEY_LOCAL_MACHINE\SOFTWARE\Microsoft\Windows Kits\Installed Roots"]
    for index, root in enumerate(roots):
        lines.append(f"    KitsRoot{10 + index}    REG_SZ    {root}")
    lines.append("")
    lines.append(
        r"HKEY_LOCAL_MACHINE\SOFTWARE\Microsoft\Windows Kits\Installed Roots\10.0.19041.0"
    )
    return "\n".join(lines) + "\n"


class TestParseKitsRoots:
    def test_reverse_order(self):
        output = (
            "HKEY_LOCAL_MACHINE\\SOFTWARE\\Microsoft\\Windows Kits\\Installed Roots\n"
            "    KitsRoot10    REG_SZ    C:\\Kits\\10\\\n"
            "    KitsRoot81    REG_SZ    C:\\Kits\\8.1\\\n"
        )
        assert parse_kits_roots(output) == [Path("C:\\Kits\\8.1\\"), Path("C:\\Kits\\10\\")]

    def test_ignores_other_lines(self):
        output = (
            "    WdkRoot    REG_SZ    C:\\WDK\n"
            "    KitsRoot10    REG_DWORD    0x1\n"
            "\n"
            "HKEY_LOCAL_MACHINE\\...\\10.0.19041.0\n"
        )
        assert parse_kits_roots(output) == []

    def test_value_with_spaces(self):
        output = "    KitsRoot10    REG_SZ    C:\\Program Files (x86)\\Windows Kits\\10\\\n"
        assert parse_kits_roots(output) == [
            Path("C:\\Program Files (x86)\\Windows Kits\\10\\")
        ]


class TestProbeKit:
    def test_direct_then_versions(self, tmp_path):
        make_rc(tmp_path / "bin" / "x64")
        make_rc(tmp_path / "bin" / "10.0.19041.0" / "x64")
        make_rc(tmp_path / "bin" / "10.0.9200.0" / "x64")
        assert probe_kit(tmp_path, "x64") == [
            tmp_path / "bin" / "x64",
            tmp_path / "bin" / "10.0.9200.0" / "x64",
            tmp_path / "bin" / "10.0.19041.0" / "x64",
        ]

    def test_arch_filter(self, tmp_path):
        make_rc(tmp_path / "bin" / "10.0.19041.0" / "x86")
        make_rc(tmp_path / "bin" / "10.0.19041.0" / "x64")
        assert probe_kit(tmp_path, "x86") == [tmp_path / "bin" / "10.0.19041.0" / "x86"]

    def test_versions_without_rc_skipped(self, tmp_path):
        (tmp_path / "bin" / "10.0.17763.0" / "x64").mkdir(parents=True)
        (tmp_path / "bin" / "README.txt").parent.mkdir(parents=True, exist_ok=True)
        (tmp_path / "bin" / "README.txt").write_text("")
        assert probe_kit(tmp_path, "x64") == []

    def test_missing_root(self, tmp_path):
        assert probe_kit(tmp_path / "nope", "x64") == []


class TestRegistryLocator:
    def test_is_locator(self):
        assert isinstance(RegistryLocator(), Locator)
        assert isinstance(SearchPathLocator(), Locator)

    def test_arch(self):
        assert RegistryLocator(64).arch == "x64"
        assert RegistryLocator(32).arch == "x86"
        assert repr(RegistryLocator(32)) == "RegistryLocator(arch='x86')"

    def test_candidates(self, tmp_path):
        kit10 = tmp_path / "10"
        kit81 = tmp_path / "8.1"
        make_rc(kit10 / "bin" / "10.0.19041.0" / "x64")
        make_rc(kit81 / "bin" / "x64")
        result = subprocess.CompletedProcess(
            [], 0, stdout=reg_output(kit10, kit81), stderr=""
        )
        with patch("subprocess.run", return_value=result) as mock_run:
            found = RegistryLocator(64).candidates()

        mock_run.assert_called_once()
        assert mock_run.call_args[0][0][:2] == ["reg", "query"]
        # Roots listed last are probed first
        assert found == [
            kit81 / "bin" / "x64",
            kit10 / "bin" / "10.0.19041.0" / "x64",
        ]

    def test_root_without_binaries(self, tmp_path):
        result = subprocess.CompletedProcess(
            [], 0, stdout=reg_output(tmp_path / "missing"), stderr=""
        )
        with patch("subprocess.run", return_value=result):
            assert RegistryLocator().candidates() == []
            with pytest.raises(ToolkitNotFoundError, match="no Windows SDK"):
                RegistryLocator().find()

    def test_query_failure(self):
        result = subprocess.CompletedProcess(
            [], 1, stdout="", stderr="ERROR: The system was unable to find the key"
        )
        with patch("subprocess.run", return_value=result):
            with pytest.raises(ToolkitNotFoundError, match="unable to find") as exc:
                RegistryLocator().candidates()
        assert exc.value.tool == "rc.exe"

    def test_reg_not_available(self):
        with patch("subprocess.run", side_effect=FileNotFoundError("reg")):
            with pytest.raises(ToolkitNotFoundError, match="could not query registry"):
                RegistryLocator().candidates()


class TestSearchPathLocator:
    def test_no_candidates(self):
        assert SearchPathLocator().candidates() == []


class TestLocatorFor:
    def test_msvc(self):
        locator = locator_for("msvc", 32)
        assert isinstance(locator, RegistryLocator)
        assert locator.pointer_width == 32

    def test_msvc_alias(self):
        assert isinstance(locator_for("VC"), RegistryLocator)

    def test_gnu(self):
        assert isinstance(locator_for("gnu"), SearchPathLocator)

    def test_unknown(self):
        assert isinstance(locator_for("borland"), SearchPathLocator)


class TestDefaultToolkitPath:
    def test_last_candidate(self, tmp_path):
        class Two:
            def candidates(self):
                return [tmp_path / "old", tmp_path / "new"]

        assert default_toolkit_path(Two()) == tmp_path / "new"

    def test_nothing_found(self):
        assert default_toolkit_path(SearchPathLocator()) is None

    def test_registry_failure_logged(self, caplog):
        with patch("subprocess.run", side_effect=FileNotFoundError("reg")):
            with caplog.at_level(logging.WARNING):
                assert default_toolkit_path(RegistryLocator()) is None
        assert "Toolkit lookup failed" in caplog.text
