"""Line-by-line ``cat`` transformation of byte streams."""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO

from redpanda.config import TextOptions

NEWLINE = 0x0A
TAB = 0x09
DEL = 0x7F


@dataclass
class TransformState:
    """Counters carried from one input to the next so output reads as one concatenated stream."""

    line_number: int = 0
    prev_was_blank: bool = False


def _control(byte: int) -> bytes:
    """Caret notation for a 7-bit byte."""
    if byte < 0x20:
        return bytes((ord("^"), byte + 0x40))
    if byte == DEL:
        return b"^?"
    return bytes((byte,))


def escape_byte(byte: int, show_tabs: bool, show_nonprinting: bool) -> bytes:
    if byte == NEWLINE:
        return b"\n"
    if byte == TAB:
        return b"^I" if show_tabs else b"\t"
    if not show_nonprinting:
        return bytes((byte,))
    if byte >= 0x80:
        return b"M-" + _control(byte & 0x7F)
    return _control(byte)


def _build_table(show_tabs: bool, show_nonprinting: bool) -> tuple[bytes, ...]:
    return tuple(escape_byte(b, show_tabs, show_nonprinting) for b in range(256))


# Every flag combination that reaches the slow path, keyed by (show_tabs, show_nonprinting)
_TABLES = {
    (show_tabs, show_nonprinting): _build_table(show_tabs, show_nonprinting)
    for show_tabs in (False, True)
    for show_nonprinting in (False, True)
}


def escape_line(line: bytes, options: TextOptions) -> bytes:
    if not options.escapes:
        return line
    table = _TABLES[(options.show_tabs, options.escapes)]
    return b"".join(table[b] for b in line)


def transform_line(raw: bytes, options: TextOptions, state: TransformState) -> bytes | None:
    """Render one line read up to and including its newline. Returns None when squeezed away."""
    had_trailing_newline = raw.endswith(b"\n")
    line = raw[:-1] if had_trailing_newline else raw
    is_blank = not line

    if options.squeeze_blank and is_blank and state.prev_was_blank:
        return None
    state.prev_was_blank = is_blank

    parts = []
    if options.number_nonblank:
        if not is_blank:
            state.line_number += 1
            parts.append(b"%6d\t" % state.line_number)
    elif options.number:
        state.line_number += 1
        parts.append(b"%6d\t" % state.line_number)

    parts.append(escape_line(line, options))

    if had_trailing_newline:
        if options.show_ends:
            parts.append(b"$")
        parts.append(b"\n")
    return b"".join(parts)


def transform_stream(source: BinaryIO, write, options: TextOptions, state: TransformState, flush=None) -> None:
    """Copy ``source`` to ``write`` one line at a time, calling ``flush`` after each line if given."""
    while True:
        raw = source.readline()
        if not raw:
            break
        rendered = transform_line(raw, options, state)
        if rendered is None:
            continue
        write(rendered)
        if flush is not None:
            flush()
