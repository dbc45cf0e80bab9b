import struct

import pytest

from peforge.structures import (
    BITMAP_SIGNATURE,
    BitmapFileHeader,
    BitmapInfoHeader,
    ErrorCode,
    PeError,
    PeType,
    SectionHeader,
    TlsDirectory,
    align_up,
)


@pytest.mark.parametrize("value", [0, 1, 3, 4, 5, 511, 512, 513, 0x1234])
@pytest.mark.parametrize("alignment", [4, 0x200, 0x1000])
def test_align_up_invariants(value, alignment):
    result = align_up(value, alignment)
    assert result % alignment == 0
    assert result >= value
    assert result - value < alignment


def test_align_up_keeps_aligned_value():
    assert align_up(0x1000, 0x200) == 0x1000


def test_align_up_rejects_zero_alignment():
    with pytest.raises(ValueError):
        align_up(5, 0)


def test_pe_error_carries_code():
    err = PeError("boom", ErrorCode.INSUFFICIENT_SPACE)
    assert err.code is ErrorCode.INSUFFICIENT_SPACE
    assert str(err) == "boom"


def test_section_header_size_is_fixed():
    assert SectionHeader.SIZE == 40
    assert len(SectionHeader().pack()) == SectionHeader.SIZE


def test_section_header_round_trip():
    header = SectionHeader(
        name=b".text\0\0\0",
        virtual_size=0x1234,
        virtual_address=0x1000,
        size_of_raw_data=0x1400,
        pointer_to_raw_data=0x400,
        number_of_relocations=2,
        characteristics=0x60000020,
    )
    assert SectionHeader.unpack(header.pack()) == header


def test_section_header_name_is_first_field():
    packed = SectionHeader(name=b".data\0\0\0").pack()
    assert packed[:8] == b".data\0\0\0"


def test_section_header_unpack_short_data():
    with pytest.raises(PeError) as info:
        SectionHeader.unpack(b"\0" * 10)
    assert info.value.code is ErrorCode.INSUFFICIENT_DATA


@pytest.mark.parametrize("pe_type", list(PeType))
def test_tls_directory_round_trip(pe_type):
    tls = TlsDirectory(0x401000, 0x401010, 0x402000, 0x403000, 16, 0)
    assert TlsDirectory.unpack(tls.pack(pe_type), pe_type) == tls


def test_tls_directory_sizes():
    assert len(TlsDirectory().pack(PeType.PE32)) == 24
    assert len(TlsDirectory().pack(PeType.PE64)) == 40


def test_tls_directory_64_holds_large_addresses():
    tls = TlsDirectory(start_address_of_raw_data=0x140001000)
    assert TlsDirectory.unpack(tls.pack(PeType.PE64), PeType.PE64).start_address_of_raw_data == 0x140001000


def test_tls_directory_unpack_short_data():
    with pytest.raises(PeError):
        TlsDirectory.unpack(b"\0" * 24, PeType.PE64)


def test_bitmap_file_header_signature():
    packed = BitmapFileHeader().pack()
    assert packed[:2] == b"BM"
    assert BitmapFileHeader.unpack(packed).bf_type == BITMAP_SIGNATURE


def test_bitmap_file_header_round_trip():
    header = BitmapFileHeader(bf_size=1000, bf_off_bits=54)
    packed = header.pack()
    assert len(packed) == BitmapFileHeader.SIZE
    assert BitmapFileHeader.unpack(packed) == header


def test_bitmap_info_header_unpack():
    data = struct.pack("<IiiHHIIiiII", 40, 16, -16, 1, 8, 0, 256, 0, 0, 3, 0)
    info = BitmapInfoHeader.unpack(data)
    assert info.bi_width == 16
    assert info.bi_height == -16
    assert info.bi_bit_count == 8
    assert info.bi_clr_used == 3


def test_bitmap_info_header_unpack_short_data():
    with pytest.raises(PeError) as info:
        BitmapInfoHeader.unpack(b"\0" * (BitmapInfoHeader.SIZE - 1))
    assert info.value.code is ErrorCode.INSUFFICIENT_DATA