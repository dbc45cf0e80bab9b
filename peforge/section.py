"""Image section: header fields plus raw data with optional virtual mapping."""

from __future__ import annotations

from .structures import (
    IMAGE_SCN_MEM_DISCARDABLE,
    IMAGE_SCN_MEM_EXECUTE,
    IMAGE_SCN_MEM_READ,
    IMAGE_SCN_MEM_SHARED,
    IMAGE_SCN_MEM_WRITE,
    SectionHeader,
    align_up,
)


class Section:
    """A PE section.

    Raw data is kept in a bytearray. Requesting virtual data pads it with
    zeros to the aligned virtual size; requesting raw data again drops the
    padding.
    """

    def __init__(self, name: str = "", raw_data: bytes = b"") -> None:
        self.header = SectionHeader()
        self._raw_data = bytearray(raw_data)
        self._old_size: int | None = None
        self.name = name

    @property
    def name(self) -> str:
        return self.header.name.split(b"\0", 1)[0].decode("latin-1")

    @name.setter
    def name(self, value: str) -> None:
        self.header.name = value.encode("latin-1")[:8].ljust(8, b"\0")

    def set_flag(self, flag: int, enabled: bool = True) -> Section:
        if enabled:
            self.header.characteristics |= flag
        else:
            self.header.characteristics &= ~flag & 0xFFFFFFFF
        return self

    def _has_flag(self, flag: int) -> bool:
        return bool(self.header.characteristics & flag)

    @property
    def readable(self) -> bool:
        return self._has_flag(IMAGE_SCN_MEM_READ)

    @readable.setter
    def readable(self, value: bool) -> None:
        self.set_flag(IMAGE_SCN_MEM_READ, value)

    @property
    def writeable(self) -> bool:
        return self._has_flag(IMAGE_SCN_MEM_WRITE)

    @writeable.setter
    def writeable(self, value: bool) -> None:
        self.set_flag(IMAGE_SCN_MEM_WRITE, value)

    @property
    def executable(self) -> bool:
        return self._has_flag(IMAGE_SCN_MEM_EXECUTE)

    @executable.setter
    def executable(self, value: bool) -> None:
        self.set_flag(IMAGE_SCN_MEM_EXECUTE, value)

    @property
    def shared(self) -> bool:
        return self._has_flag(IMAGE_SCN_MEM_SHARED)

    @shared.setter
    def shared(self, value: bool) -> None:
        self.set_flag(IMAGE_SCN_MEM_SHARED, value)

    @property
    def discardable(self) -> bool:
        return self._has_flag(IMAGE_SCN_MEM_DISCARDABLE)

    @discardable.setter
    def discardable(self, value: bool) -> None:
        self.set_flag(IMAGE_SCN_MEM_DISCARDABLE, value)

    @property
    def virtual_size(self) -> int:
        return self.header.virtual_size

    @virtual_size.setter
    def virtual_size(self, value: int) -> None:
        self.header.virtual_size = value

    @property
    def virtual_address(self) -> int:
        return self.header.virtual_address

    @virtual_address.setter
    def virtual_address(self, value: int) -> None:
        self.header.virtual_address = value

    @property
    def size_of_raw_data(self) -> int:
        return self.header.size_of_raw_data

    @size_of_raw_data.setter
    def size_of_raw_data(self, value: int) -> None:
        self.header.size_of_raw_data = value

    @property
    def pointer_to_raw_data(self) -> int:
        return self.header.pointer_to_raw_data

    @pointer_to_raw_data.setter
    def pointer_to_raw_data(self, value: int) -> None:
        self.header.pointer_to_raw_data = value

    @property
    def characteristics(self) -> int:
        return self.header.characteristics

    @characteristics.setter
    def characteristics(self, value: int) -> None:
        self.header.characteristics = value

    def empty(self) -> bool:
        """True if the section has no raw data."""
        if self._old_size is not None:
            return self._old_size == 0
        return not self._raw_data

    def get_raw_data(self) -> bytearray:
        """Return the raw data buffer, dropping any virtual padding."""
        self._unmap_virtual()
        return self._raw_data

    def set_raw_data(self, data: bytes) -> None:
        self._old_size = None
        self._raw_data = bytearray(data)

    def get_virtual_data(self, section_alignment: int) -> bytearray:
        """Return the data buffer padded with zeros to the aligned virtual size."""
        self._map_virtual(section_alignment)
        return self._raw_data

    def _map_virtual(self, section_alignment: int) -> None:
        size = self.aligned_virtual_size(section_alignment)
        if self._old_size is None and size and size > len(self._raw_data):
            self._old_size = len(self._raw_data)
            self._raw_data.extend(bytes(size - len(self._raw_data)))

    def _unmap_virtual(self) -> None:
        if self._old_size is not None:
            del self._raw_data[self._old_size:]
            self._old_size = None

    def aligned_virtual_size(self, section_alignment: int) -> int:
        if self.size_of_raw_data and not self.virtual_size:
            return align_up(self.size_of_raw_data, section_alignment)
        return align_up(self.virtual_size, section_alignment)

    def aligned_raw_size(self, file_alignment: int) -> int:
        if self.size_of_raw_data:
            return align_up(self.size_of_raw_data, file_alignment)
        return 0

    def contains_raw_offset(self, offset: int) -> bool:
        """True if the file offset falls within this section's raw data."""
        start = self.pointer_to_raw_data
        return start <= offset < start + self.size_of_raw_data