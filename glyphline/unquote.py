# this_file: glyphline/unquote.py
"""
Escape-sequence unquoting for text given on the command line.
"""

from __future__ import annotations

import re

from .base import ConfigError

_SIMPLE = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    "'": "'",
    '"': '"',
}

_ESCAPE = re.compile(
    r"\\(?:"
    r"(?P<simple>[abfnrtv\\'\"])"
    r"|x(?P<hex>[0-9A-Fa-f]{2})"
    r"|u(?P<u16>[0-9A-Fa-f]{4})"
    r"|U(?P<u32>[0-9A-Fa-f]{8})"
    r"|(?P<oct>[0-7]{3})"
    r"|(?P<bad>.?))",
    re.DOTALL,
)


def unquote(text: str) -> str:
    """
    Replace backslash escapes in ``text``.

    Supports \\a \\b \\f \\n \\r \\t \\v \\\\ \\' \\", \\xHH, \\uHHHH,
    \\UHHHHHHHH and three-digit octal \\ooo.

    Raises:
        ConfigError: On an unknown or truncated escape
    """

    def replace(match: re.Match) -> str:
        if match.group("simple") is not None:
            return _SIMPLE[match.group("simple")]
        for name, base in (("hex", 16), ("u16", 16), ("u32", 16), ("oct", 8)):
            digits = match.group(name)
            if digits is not None:
                code = int(digits, base)
                if code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
                    raise ConfigError(f"Invalid code point in escape {match.group(0)!r}")
                return chr(code)
        raise ConfigError(f"Invalid escape sequence {match.group(0)!r}")

    return _ESCAPE.sub(replace, text)
