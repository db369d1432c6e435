# SPDX-License-Identifier: MIT
"""Tests for pwinres.util.lang."""

from __future__ import annotations

import pytest

from pwinres.util.lang import (
    LANG_ENGLISH,
    LANG_FRENCH,
    LANG_GERMAN,
    LANG_NEUTRAL,
    SUBLANG_DEFAULT,
    SUBLANG_ENGLISH_UK,
    SUBLANG_ENGLISH_US,
    SUBLANG_NEUTRAL,
    make_lang_id,
)


@pytest.mark.parametrize(
    "primary,sub,expected",
    [
        (LANG_NEUTRAL, SUBLANG_NEUTRAL, 0x0000),
        (LANG_ENGLISH, SUBLANG_ENGLISH_US, 0x0409),
        (LANG_ENGLISH, SUBLANG_ENGLISH_UK, 0x0809),
        (LANG_GERMAN, SUBLANG_DEFAULT, 0x0407),
        (LANG_FRENCH, SUBLANG_DEFAULT, 0x040C),
    ],
)
def test_make_lang_id(primary, sub, expected):
    assert make_lang_id(primary, sub) == expected


def test_fields_are_masked():
    assert make_lang_id(0x7FF, 0x7F) == 0xFFFF
