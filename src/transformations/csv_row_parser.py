"""
Line-oriented CSV splitting for the OWID dataset.

The OWID file only quotes fields that contain commas (country names such as
"Bonaire, Sint Eustatius and Saba"), so a plain quote toggle is enough;
doubled quotes inside a quoted span are not treated as escapes.
"""

from __future__ import annotations

from typing import Iterator, List

DELIMITER = ","
QUOTE = '"'


def parse_csv_line(line: str) -> List[str]:
    """
    Split one CSV line into trimmed field values.

    Commas inside a double-quoted span do not delimit. Every `"` flips the
    quoted state and is not copied to the output.

    >>> parse_csv_line('a,"b,c",d')
    ['a', 'b,c', 'd']
    """
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False

    for char in line:
        if char == QUOTE:
            in_quotes = not in_quotes
        elif char == DELIMITER and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    fields.append("".join(current).strip())
    return fields


def iter_csv_lines(text: str) -> Iterator[str]:
    """Yield the non-blank lines of `text`, without line terminators."""
    for line in text.splitlines():
        if line.strip():
            yield line


__all__ = ["parse_csv_line", "iter_csv_lines"]
