# SPDX-License-Identifier: MIT
"""Windows language identifiers.

A language id combines a primary language (low 10 bits) with a
sublanguage (high 6 bits). Only a few common constants are listed here;
any 16-bit value may be passed to WindowsResource.with_language().

| Language            | Value    |
|---------------------|----------|
| Neutral             | `0x0000` |
| English (US)        | `0x0409` |
| English (GB)        | `0x0809` |
| German              | `0x0407` |
| French (FR)         | `0x040c` |
"""

from __future__ import annotations

LANG_NEUTRAL = 0x00
LANG_ENGLISH = 0x09
LANG_GERMAN = 0x07
LANG_FRENCH = 0x0C

SUBLANG_NEUTRAL = 0x00
SUBLANG_DEFAULT = 0x01
SUBLANG_ENGLISH_US = 0x01
SUBLANG_ENGLISH_UK = 0x02


def make_lang_id(primary: int, sub: int) -> int:
    """Combine a primary language and sublanguage into a language id.

    Example:
        >>> hex(make_lang_id(LANG_ENGLISH, SUBLANG_ENGLISH_US))
        '0x409'
    """
    return ((sub & 0x3F) << 10) | (primary & 0x3FF)
