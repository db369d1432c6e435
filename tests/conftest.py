# SPDX-License-Identifier: MIT
"""Shared fixtures for pwinres tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from pwinres.configure.environment import BuildEnvironment, _reset_vars
from pwinres.configure.metadata import PackageMetadata


@pytest.fixture(autouse=True)
def clean_build_vars(monkeypatch: pytest.MonkeyPatch):
    """Run every test without PWINRES_* variables from the outside."""
    for name in list(os.environ):
        if name.startswith("PWINRES_"):
            monkeypatch.delenv(name)
    _reset_vars()
    yield
    # The CLI exports PWINRES_VARS directly
    os.environ.pop("PWINRES_VARS", None)
    _reset_vars()


@pytest.fixture
def build_env(tmp_path: Path) -> BuildEnvironment:
    return BuildEnvironment(
        project_dir=tmp_path,
        out_dir=tmp_path / "out",
        toolkit="gnu",
        pointer_width=64,
    )


@pytest.fixture
def demo_metadata() -> PackageMetadata:
    return PackageMetadata(name="demo", version="1.0.0")
