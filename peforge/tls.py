"""Thread local storage (TLS) directory description and its binary forms."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Iterable

from .structures import ErrorCode, PeError, PeType, TlsDirectory

_ADDRESS_FORMATS = {
    PeType.PE32: struct.Struct("<I"),
    PeType.PE64: struct.Struct("<Q"),
}
_MAX_RVA = 0xFFFFFFFF


def _incorrect_tls() -> PeError:
    return PeError("Incorrect TLS directory", ErrorCode.INCORRECT_TLS_DIRECTORY)


def _va_to_rva(va: int, image_base: int) -> int:
    rva = va - image_base
    if rva < 0 or rva > _MAX_RVA:
        raise PeError(
            f"VA 0x{va:x} cannot be converted to an RVA",
            ErrorCode.INCORRECT_TLS_DIRECTORY,
        )
    return rva


@dataclass
class TlsInfo:
    """TLS information of an image, with addresses stored as RVAs."""

    raw_data_start_rva: int = 0
    raw_data_end_rva: int = 0
    index_rva: int = 0
    callbacks_rva: int = 0
    size_of_zero_fill: int = 0
    characteristics: int = 0
    raw_data: bytes = b""
    callbacks: list[int] = field(default_factory=list)

    def add_tls_callback(self, rva: int) -> None:
        self.callbacks.append(rva)

    def clear_tls_callbacks(self) -> None:
        self.callbacks.clear()

    def recalc_raw_data_end_rva(self) -> None:
        """Set the end RVA of the raw data from its start RVA and length."""
        self.raw_data_end_rva = (self.raw_data_start_rva + len(self.raw_data)) & _MAX_RVA

    def to_directory(self, image_base: int) -> TlsDirectory:
        """Build the on-disk TLS directory (addresses as VAs).

        Raises PeError if the raw data range is reversed or the index RVA
        is zero.
        """
        if self.raw_data_end_rva < self.raw_data_start_rva or self.index_rva == 0:
            raise _incorrect_tls()

        directory = TlsDirectory()
        if self.raw_data_start_rva:
            directory.start_address_of_raw_data = image_base + self.raw_data_start_rva
            directory.size_of_zero_fill = self.size_of_zero_fill
        if self.raw_data_end_rva:
            directory.end_address_of_raw_data = image_base + self.raw_data_end_rva
        directory.address_of_index = image_base + self.index_rva
        if self.callbacks_rva:
            directory.address_of_callbacks = image_base + self.callbacks_rva
        directory.characteristics = self.characteristics
        return directory

    @classmethod
    def from_directory(cls, directory: TlsDirectory, image_base: int) -> TlsInfo:
        """Read TLS information from an on-disk TLS directory.

        Raw data and callbacks live elsewhere in the image and are left
        empty. An empty raw data range whose address cannot be converted is
        treated as absent.
        """
        start = directory.start_address_of_raw_data
        end = directory.end_address_of_raw_data

        if start == end:
            try:
                _va_to_rva(end, image_base)
            except PeError:
                start = end = 0

        if start and end < start:
            raise _incorrect_tls()

        def convert(va: int) -> int:
            return _va_to_rva(va, image_base) if va else 0

        return cls(
            raw_data_start_rva=convert(start),
            raw_data_end_rva=convert(end),
            index_rva=convert(directory.address_of_index),
            callbacks_rva=convert(directory.address_of_callbacks),
            size_of_zero_fill=directory.size_of_zero_fill,
            characteristics=directory.characteristics,
        )


def pack_tls_callbacks(
    callbacks: Iterable[int], image_base: int, pe_type: PeType
) -> bytes:
    """Encode callback RVAs as a null-terminated array of VAs."""
    fmt = _ADDRESS_FORMATS[pe_type]
    limit = 1 << (fmt.size * 8)
    out = bytearray()
    for rva in callbacks:
        va = image_base + rva
        if va >= limit:
            raise PeError(
                f"callback VA 0x{va:x} does not fit the image type",
                ErrorCode.INCORRECT_TLS_DIRECTORY,
            )
        out += fmt.pack(va)
    out += fmt.pack(0)
    return bytes(out)