"""Constants, error types and fixed binary layouts of the PE image format."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from typing import ClassVar


class PeType(enum.Enum):
    """Kind of image: PE32 or PE32+ (64-bit)."""

    PE32 = "pe32"
    PE64 = "pe64"


class ErrorCode(enum.Enum):
    """Reasons a PE operation can fail."""

    INSUFFICIENT_DATA = enum.auto()
    CANNOT_REBUILD_IMAGE = enum.auto()
    STREAM_IS_BAD = enum.auto()
    INCORRECT_BOUND_IMPORT_DIRECTORY = enum.auto()
    INCORRECT_RELOCATION_DIRECTORY = enum.auto()
    SECTION_IS_NOT_ATTACHED = enum.auto()
    INSUFFICIENT_SPACE = enum.auto()
    DIRECTORY_DOES_NOT_EXIST = enum.auto()
    INCORRECT_TLS_DIRECTORY = enum.auto()
    INCORRECT_RESOURCE_DIRECTORY = enum.auto()
    RESOURCE_DIRECTORY_ENTRY_ERROR = enum.auto()
    RESOURCE_DIRECTORY_ENTRY_NOT_FOUND = enum.auto()
    RESOURCE_DATA_ENTRY_NOT_FOUND = enum.auto()
    RESOURCE_INCORRECT_BITMAP = enum.auto()


class PeError(Exception):
    """Error raised by PE parsing and rebuilding code."""

    def __init__(self, message: str, code: ErrorCode) -> None:
        super().__init__(message)
        self.code = code


def align_up(value: int, alignment: int) -> int:
    """Round ``value`` up to the next multiple of ``alignment``."""
    if alignment <= 0:
        raise ValueError("alignment must be positive")
    return -(-value // alignment) * alignment


IMAGE_NUMBEROF_DIRECTORY_ENTRIES = 16
IMAGE_NT_OPTIONAL_HDR32_MAGIC = 0x10B
IMAGE_NT_OPTIONAL_HDR64_MAGIC = 0x20B
IMAGE_RESOURCE_NAME_IS_STRING = 0x80000000
IMAGE_RESOURCE_DATA_IS_DIRECTORY = 0x80000000

IMAGE_DLLCHARACTERISTICS_DYNAMIC_BASE = 0x0040
IMAGE_DLLCHARACTERISTICS_FORCE_INTEGRITY = 0x0080
IMAGE_DLLCHARACTERISTICS_NX_COMPAT = 0x0100
IMAGE_DLLCHARACTERISTICS_NO_ISOLATION = 0x0200
IMAGE_DLLCHARACTERISTICS_NO_SEH = 0x0400
IMAGE_DLLCHARACTERISTICS_NO_BIND = 0x0800
IMAGE_DLLCHARACTERISTICS_WDM_DRIVER = 0x2000
IMAGE_DLLCHARACTERISTICS_TERMINAL_SERVER_AWARE = 0x8000

IMAGE_SIZEOF_FILE_HEADER = 20

IMAGE_FILE_RELOCS_STRIPPED = 0x0001
IMAGE_FILE_EXECUTABLE_IMAGE = 0x0002
IMAGE_FILE_LINE_NUMS_STRIPPED = 0x0004
IMAGE_FILE_LOCAL_SYMS_STRIPPED = 0x0008
IMAGE_FILE_AGGRESIVE_WS_TRIM = 0x0010
IMAGE_FILE_LARGE_ADDRESS_AWARE = 0x0020
IMAGE_FILE_BYTES_REVERSED_LO = 0x0080
IMAGE_FILE_32BIT_MACHINE = 0x0100
IMAGE_FILE_DEBUG_STRIPPED = 0x0200
IMAGE_FILE_REMOVABLE_RUN_FROM_SWAP = 0x0400
IMAGE_FILE_NET_RUN_FROM_SWAP = 0x0800
IMAGE_FILE_SYSTEM = 0x1000
IMAGE_FILE_DLL = 0x2000
IMAGE_FILE_UP_SYSTEM_ONLY = 0x4000
IMAGE_FILE_BYTES_REVERSED_HI = 0x8000

IMAGE_SCN_LNK_NRELOC_OVFL = 0x01000000
IMAGE_SCN_MEM_DISCARDABLE = 0x02000000
IMAGE_SCN_MEM_NOT_CACHED = 0x04000000
IMAGE_SCN_MEM_NOT_PAGED = 0x08000000
IMAGE_SCN_MEM_SHARED = 0x10000000
IMAGE_SCN_MEM_EXECUTE = 0x20000000
IMAGE_SCN_MEM_READ = 0x40000000
IMAGE_SCN_MEM_WRITE = 0x80000000
IMAGE_SCN_CNT_CODE = 0x00000020
IMAGE_SCN_CNT_INITIALIZED_DATA = 0x00000040
IMAGE_SCN_CNT_UNINITIALIZED_DATA = 0x00000080

IMAGE_DIRECTORY_ENTRY_EXPORT = 0
IMAGE_DIRECTORY_ENTRY_IMPORT = 1
IMAGE_DIRECTORY_ENTRY_RESOURCE = 2
IMAGE_DIRECTORY_ENTRY_EXCEPTION = 3
IMAGE_DIRECTORY_ENTRY_SECURITY = 4
IMAGE_DIRECTORY_ENTRY_BASERELOC = 5
IMAGE_DIRECTORY_ENTRY_DEBUG = 6
IMAGE_DIRECTORY_ENTRY_ARCHITECTURE = 7
IMAGE_DIRECTORY_ENTRY_GLOBALPTR = 8
IMAGE_DIRECTORY_ENTRY_TLS = 9
IMAGE_DIRECTORY_ENTRY_LOAD_CONFIG = 10
IMAGE_DIRECTORY_ENTRY_BOUND_IMPORT = 11
IMAGE_DIRECTORY_ENTRY_IAT = 12
IMAGE_DIRECTORY_ENTRY_DELAY_IMPORT = 13
IMAGE_DIRECTORY_ENTRY_COM_DESCRIPTOR = 14

IMAGE_SUBSYSTEM_UNKNOWN = 0
IMAGE_SUBSYSTEM_NATIVE = 1
IMAGE_SUBSYSTEM_WINDOWS_GUI = 2
IMAGE_SUBSYSTEM_WINDOWS_CUI = 3
IMAGE_SUBSYSTEM_OS2_CUI = 5
IMAGE_SUBSYSTEM_POSIX_CUI = 7
IMAGE_SUBSYSTEM_NATIVE_WINDOWS = 8
IMAGE_SUBSYSTEM_WINDOWS_CE_GUI = 9
IMAGE_SUBSYSTEM_EFI_APPLICATION = 10
IMAGE_SUBSYSTEM_EFI_BOOT_SERVICE_DRIVER = 11
IMAGE_SUBSYSTEM_EFI_RUNTIME_DRIVER = 12
IMAGE_SUBSYSTEM_EFI_ROM = 13
IMAGE_SUBSYSTEM_XBOX = 14
IMAGE_SUBSYSTEM_WINDOWS_BOOT_APPLICATION = 16

IMAGE_ORDINAL_FLAG64 = 0x8000000000000000
IMAGE_ORDINAL_FLAG32 = 0x80000000

IMAGE_REL_BASED_ABSOLUTE = 0
IMAGE_REL_BASED_HIGH = 1
IMAGE_REL_BASED_LOW = 2
IMAGE_REL_BASED_HIGHLOW = 3
IMAGE_REL_BASED_HIGHADJ = 4
IMAGE_REL_BASED_MIPS_JMPADDR = 5
IMAGE_REL_BASED_MIPS_JMPADDR16 = 9
IMAGE_REL_BASED_IA64_IMM64 = 9
IMAGE_REL_BASED_DIR64 = 10

BITMAP_SIGNATURE = 0x4D42


def _check_length(data: bytes, size: int, what: str) -> None:
    if len(data) < size:
        raise PeError(
            f"{what} needs {size} bytes, got {len(data)}", ErrorCode.INSUFFICIENT_DATA
        )


@dataclass
class SectionHeader:
    """IMAGE_SECTION_HEADER."""

    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<8sIIIIIIHHI")
    SIZE: ClassVar[int] = _FORMAT.size

    name: bytes = b""
    virtual_size: int = 0
    virtual_address: int = 0
    size_of_raw_data: int = 0
    pointer_to_raw_data: int = 0
    pointer_to_relocations: int = 0
    pointer_to_linenumbers: int = 0
    number_of_relocations: int = 0
    number_of_linenumbers: int = 0
    characteristics: int = 0

    def pack(self) -> bytes:
        return self._FORMAT.pack(
            self.name[:8],
            self.virtual_size,
            self.virtual_address,
            self.size_of_raw_data,
            self.pointer_to_raw_data,
            self.pointer_to_relocations,
            self.pointer_to_linenumbers,
            self.number_of_relocations,
            self.number_of_linenumbers,
            self.characteristics,
        )

    @classmethod
    def unpack(cls, data: bytes) -> SectionHeader:
        _check_length(data, cls.SIZE, "section header")
        return cls(*cls._FORMAT.unpack_from(data, 0))


_TLS_FORMATS = {
    PeType.PE32: struct.Struct("<IIIIII"),
    PeType.PE64: struct.Struct("<QQQQII"),
}


@dataclass
class TlsDirectory:
    """IMAGE_TLS_DIRECTORY32 / IMAGE_TLS_DIRECTORY64 (addresses are VAs)."""

    start_address_of_raw_data: int = 0
    end_address_of_raw_data: int = 0
    address_of_index: int = 0
    address_of_callbacks: int = 0
    size_of_zero_fill: int = 0
    characteristics: int = 0

    def pack(self, pe_type: PeType) -> bytes:
        return _TLS_FORMATS[pe_type].pack(
            self.start_address_of_raw_data,
            self.end_address_of_raw_data,
            self.address_of_index,
            self.address_of_callbacks,
            self.size_of_zero_fill,
            self.characteristics,
        )

    @classmethod
    def unpack(cls, data: bytes, pe_type: PeType) -> TlsDirectory:
        fmt = _TLS_FORMATS[pe_type]
        _check_length(data, fmt.size, "TLS directory")
        return cls(*fmt.unpack_from(data, 0))


@dataclass
class BitmapFileHeader:
    """BITMAPFILEHEADER."""

    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<HIHHI")
    SIZE: ClassVar[int] = _FORMAT.size

    bf_type: int = BITMAP_SIGNATURE
    bf_size: int = 0
    bf_reserved1: int = 0
    bf_reserved2: int = 0
    bf_off_bits: int = 0

    def pack(self) -> bytes:
        return self._FORMAT.pack(
            self.bf_type,
            self.bf_size,
            self.bf_reserved1,
            self.bf_reserved2,
            self.bf_off_bits,
        )

    @classmethod
    def unpack(cls, data: bytes) -> BitmapFileHeader:
        _check_length(data, cls.SIZE, "bitmap file header")
        return cls(*cls._FORMAT.unpack_from(data, 0))


@dataclass
class BitmapInfoHeader:
    """BITMAPINFOHEADER."""

    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<IiiHHIIiiII")
    SIZE: ClassVar[int] = _FORMAT.size

    bi_size: int = 0
    bi_width: int = 0
    bi_height: int = 0
    bi_planes: int = 0
    bi_bit_count: int = 0
    bi_compression: int = 0
    bi_size_image: int = 0
    bi_x_pels_per_meter: int = 0
    bi_y_pels_per_meter: int = 0
    bi_clr_used: int = 0
    bi_clr_important: int = 0

    @classmethod
    def unpack(cls, data: bytes) -> BitmapInfoHeader:
        _check_length(data, cls.SIZE, "bitmap info header")
        return cls(*cls._FORMAT.unpack_from(data, 0))