"""Base relocation tables: parsing, building and applying them to an image."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import ClassVar, Iterable

from .structures import (
    IMAGE_REL_BASED_ABSOLUTE,
    ErrorCode,
    PeError,
    PeType,
    align_up,
)

_WORD = struct.Struct("<H")
_DWORD_SIZE = 4
_VALUE_FORMATS = {
    PeType.PE32: struct.Struct("<I"),
    PeType.PE64: struct.Struct("<Q"),
}


def _incorrect_directory() -> PeError:
    return PeError(
        "Incorrect relocation directory", ErrorCode.INCORRECT_RELOCATION_DIRECTORY
    )


@dataclass
class ImageBaseRelocation:
    """IMAGE_BASE_RELOCATION block header."""

    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<II")
    SIZE: ClassVar[int] = _FORMAT.size

    virtual_address: int = 0
    size_of_block: int = 0

    def pack(self) -> bytes:
        return self._FORMAT.pack(self.virtual_address, self.size_of_block)

    @classmethod
    def unpack(cls, data: bytes) -> ImageBaseRelocation:
        if len(data) < cls.SIZE:
            raise PeError(
                f"relocation block header needs {cls.SIZE} bytes, got {len(data)}",
                ErrorCode.INSUFFICIENT_DATA,
            )
        return cls(*cls._FORMAT.unpack_from(data, 0))


@dataclass
class RelocationEntry:
    """A single relocation: 12-bit offset within its block and a 4-bit type."""

    rva: int = 0
    type: int = 0

    @classmethod
    def from_item(cls, item: int) -> RelocationEntry:
        """Decode a relocation word (offset in the low 12 bits, type above)."""
        return cls(item & 0x0FFF, (item >> 12) & 0xF)

    def item(self) -> int:
        """Encode this relocation as a 16-bit word."""
        return ((self.rva & 0x0FFF) | (self.type << 12)) & 0xFFFF


@dataclass
class RelocationTable:
    """A relocation block: base RVA of a page and the relocations within it."""

    rva: int = 0
    relocations: list[RelocationEntry] = field(default_factory=list)

    def add_relocation(self, entry: RelocationEntry) -> None:
        self.relocations.append(entry)


def _read_header(data: bytes, pos: int) -> ImageBaseRelocation:
    if pos + ImageBaseRelocation.SIZE > len(data):
        raise _incorrect_directory()
    return ImageBaseRelocation.unpack(data[pos:pos + ImageBaseRelocation.SIZE])


def parse_relocation_tables(
    data: bytes, list_absolute_entries: bool = False
) -> list[RelocationTable]:
    """Parse the contents of a base relocation directory.

    Only one-word relocations are supported. ABSOLUTE (padding) entries are
    skipped unless ``list_absolute_entries`` is true.
    """
    data = bytes(data)
    if len(data) < ImageBaseRelocation.SIZE:
        raise _incorrect_directory()

    header = _read_header(data, 0)
    if header.size_of_block % 2:
        raise _incorrect_directory()

    tables: list[RelocationTable] = []
    pos = 0
    while header.size_of_block and pos < len(data):
        if pos + header.size_of_block > 0xFFFFFFFF:
            raise _incorrect_directory()
        table = RelocationTable(header.virtual_address)
        for item_pos in range(
            pos + ImageBaseRelocation.SIZE, pos + header.size_of_block, _WORD.size
        ):
            if item_pos + _WORD.size > len(data):
                raise _incorrect_directory()
            entry = RelocationEntry.from_item(_WORD.unpack_from(data, item_pos)[0])
            if list_absolute_entries or entry.type != IMAGE_REL_BASED_ABSOLUTE:
                table.add_relocation(entry)
        tables.append(table)

        pos += header.size_of_block
        if pos >= len(data):
            break
        header = _read_header(data, pos)
    return tables


def pack_relocation_tables(
    tables: Iterable[RelocationTable], offset_from_section_start: int = 0
) -> tuple[int, bytes]:
    """Build relocation directory bytes.

    Returns the DWORD-aligned offset at which the directory must be placed
    and the directory bytes. Each block ends DWORD-aligned, padded with an
    ABSOLUTE relocation where needed.
    """
    start = align_up(offset_from_section_start, _DWORD_SIZE)
    out = bytearray()
    for table in tables:
        count = len(table.relocations)
        size_of_block = ImageBaseRelocation.SIZE + _WORD.size * count
        padded = (count * _WORD.size) % _DWORD_SIZE != 0
        if padded:
            size_of_block += _WORD.size
        out += ImageBaseRelocation(table.rva, size_of_block).pack()
        for entry in table.relocations:
            out += _WORD.pack(entry.item())
        if padded:
            out += bytes(_WORD.size)
    return start, bytes(out)


def rebase_image(
    memory: bytearray,
    tables: Iterable[RelocationTable],
    image_base: int,
    new_base: int,
    pe_type: PeType,
) -> None:
    """Apply relocations to ``memory`` (indexed by RVA) for a move to ``new_base``.

    Values are DWORDs for PE32 and QWORDs for PE32+; ABSOLUTE entries are
    skipped. ``memory`` is modified in place.
    """
    fmt = _VALUE_FORMATS[pe_type]
    mask = (1 << (fmt.size * 8)) - 1
    delta = (new_base - image_base) & mask
    for table in tables:
        for entry in table.relocations:
            if entry.type == IMAGE_REL_BASED_ABSOLUTE:
                continue
            rva = table.rva + entry.rva
            if rva < 0 or rva + fmt.size > len(memory):
                raise PeError(
                    f"relocation target 0x{rva:x} is outside the image",
                    ErrorCode.INSUFFICIENT_DATA,
                )
            value = fmt.unpack_from(memory, rva)[0]
            fmt.pack_into(memory, rva, (value + delta) & mask)