"""
Permissive CSV parser used by the report preview.

Written as a small state machine instead of going through ``csv.reader`` so
it never raises on malformed input: a stray quote just toggles quoting, and
whatever was read so far is still returned.
"""

from enum import Enum
from typing import List


class _State(Enum):
    FIELD_START = "field_start"
    UNQUOTED = "unquoted"
    QUOTED = "quoted"
    QUOTE_IN_QUOTED = "quote_in_quoted"


def parse_csv(text: str, delimiter: str = ",") -> List[List[str]]:
    """
    Split CSV text into rows of cells.

    Handles quoted fields containing the delimiter or line breaks, doubled
    quotes inside quoted fields, and LF, CR or CRLF line endings. Blank
    lines are skipped, and a last row without a trailing newline is kept.

    Args:
        text: Raw CSV content
        delimiter: Field separator

    Returns:
        List of rows, each a list of cell strings
    """
    rows: List[List[str]] = []
    row: List[str] = []
    cell: List[str] = []
    state = _State.FIELD_START
    saw_quote = False

    def end_field() -> None:
        row.append("".join(cell))
        cell.clear()

    def end_row() -> None:
        nonlocal row, saw_quote
        # No cells and no quotes means a blank line; `""` alone is one empty cell
        if cell or row or saw_quote:
            end_field()
            rows.append(row)
            row = []
        saw_quote = False

    i = 0
    length = len(text)
    while i < length:
        ch = text[i]

        if state is _State.QUOTED:
            if ch == '"':
                state = _State.QUOTE_IN_QUOTED
            else:
                cell.append(ch)
            i += 1
            continue

        if state is _State.QUOTE_IN_QUOTED:
            if ch == '"':
                # doubled quote
                cell.append('"')
                state = _State.QUOTED
                i += 1
                continue
            # closing quote; reprocess ch as unquoted content
            state = _State.UNQUOTED

        if ch == '"':
            state = _State.QUOTED
            saw_quote = True
        elif ch == delimiter:
            end_field()
            state = _State.FIELD_START
        elif ch in ("\r", "\n"):
            end_row()
            state = _State.FIELD_START
            if ch == "\r" and i + 1 < length and text[i + 1] == "\n":
                i += 1
        else:
            cell.append(ch)
            state = _State.UNQUOTED
        i += 1

    end_row()
    return rows
