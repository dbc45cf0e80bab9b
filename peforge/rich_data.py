"""Decoding of the linker "Rich" block stored in the DOS stub overlay."""

from __future__ import annotations

import struct
from dataclasses import dataclass

_RICH_ID = 0x68636952  # "Rich"
_DANS_ID = 0x536E6144  # "DanS"
_DWORD = struct.Struct("<I")


@dataclass
class RichData:
    """One record of the rich block: product number, build version, use count."""

    number: int = 0
    version: int = 0
    times: int = 0


def _dword(data: bytes, pos: int) -> int | None:
    if pos + _DWORD.size > len(data):
        return None
    return _DWORD.unpack_from(data, pos)[0]


def get_rich_data(stub_overlay: bytes) -> list[RichData]:
    """Return the rich data records found in ``stub_overlay`` (empty if none)."""
    data = bytes(stub_overlay)
    if len(data) < _DWORD.size:
        return []

    rich_pos = data.find(_DWORD.pack(_RICH_ID))
    if rich_pos < 0:
        return []

    xor_key = _dword(data, rich_pos + _DWORD.size)
    if xor_key is None:
        return []

    dans_pos = next(
        (
            pos
            for pos in range(len(data) - _DWORD.size + 1)
            if _dword(data, pos) ^ xor_key == _DANS_ID
        ),
        None,
    )
    if dans_pos is None:
        return []

    records: list[RichData] = []
    pos = dans_pos + _DWORD.size * 3
    end = len(data)
    while pos < end:
        pos += _DWORD.size
        value = _dword(data, pos)
        if value is None or value == _RICH_ID:
            break
        decoded = value ^ xor_key
        pos += _DWORD.size
        times = _dword(data, pos)
        if times is None:
            break
        records.append(RichData(decoded >> 16, decoded & 0xFFFF, times ^ xor_key))
    return records