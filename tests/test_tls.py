import struct

import pytest

from peforge.structures import ErrorCode, PeError, PeType, TlsDirectory
from peforge.tls import TlsInfo, pack_tls_callbacks

BASE = 0x400000


def make_info():
    info = TlsInfo(
        raw_data_start_rva=0x2000,
        raw_data_end_rva=0x2010,
        index_rva=0x3000,
        callbacks_rva=0x3010,
        size_of_zero_fill=8,
        characteristics=5,
    )
    return info


def test_callback_list_management():
    info = TlsInfo()
    info.add_tls_callback(0x1000)
    info.add_tls_callback(0x1100)
    assert info.callbacks == [0x1000, 0x1100]
    info.clear_tls_callbacks()
    assert info.callbacks == []


def test_recalc_raw_data_end_rva():
    info = TlsInfo(raw_data_start_rva=0x2000, raw_data=b"abcd")
    info.recalc_raw_data_end_rva()
    assert info.raw_data_end_rva == 0x2000 + len(b"abcd")


def test_to_directory_converts_rvas_to_vas():
    directory = make_info().to_directory(BASE)
    assert directory.start_address_of_raw_data == BASE + 0x2000
    assert directory.end_address_of_raw_data == BASE + 0x2010
    assert directory.address_of_index == BASE + 0x3000
    assert directory.address_of_callbacks == BASE + 0x3010
    assert directory.size_of_zero_fill == 8
    assert directory.characteristics == 5


def test_round_trip_through_directory():
    info = make_info()
    restored = TlsInfo.from_directory(info.to_directory(BASE), BASE)
    assert restored == info


def test_round_trip_through_packed_directory_pe64():
    info = make_info()
    base = 0x140000000
    packed = info.to_directory(base).pack(PeType.PE64)
    restored = TlsInfo.from_directory(TlsDirectory.unpack(packed, PeType.PE64), base)
    assert restored == info


def test_zero_fill_ignored_without_raw_data():
    info = TlsInfo(index_rva=0x3000, size_of_zero_fill=16)
    directory = info.to_directory(BASE)
    assert directory.size_of_zero_fill == 0
    assert directory.start_address_of_raw_data == 0
    assert directory.address_of_callbacks == 0


def test_missing_index_is_rejected():
    info = make_info()
    info.index_rva = 0
    with pytest.raises(PeError) as err:
        info.to_directory(BASE)
    assert err.value.code is ErrorCode.INCORRECT_TLS_DIRECTORY


def test_reversed_raw_range_is_rejected():
    info = make_info()
    info.raw_data_end_rva = 0x1000
    with pytest.raises(PeError) as err:
        info.to_directory(BASE)
    assert err.value.code is ErrorCode.INCORRECT_TLS_DIRECTORY


def test_unconvertible_empty_range_is_dropped():
    directory = TlsDirectory(
        start_address_of_raw_data=0x10,
        end_address_of_raw_data=0x10,
        address_of_index=BASE + 0x3000,
    )
    info = TlsInfo.from_directory(directory, BASE)
    assert info.raw_data_start_rva == 0
    assert info.raw_data_end_rva == 0
    assert info.index_rva == 0x3000


def test_reversed_directory_range_is_rejected():
    directory = TlsDirectory(
        start_address_of_raw_data=BASE + 0x2010,
        end_address_of_raw_data=BASE + 0x2000,
        address_of_index=BASE + 0x3000,
    )
    with pytest.raises(PeError) as err:
        TlsInfo.from_directory(directory, BASE)
    assert err.value.code is ErrorCode.INCORRECT_TLS_DIRECTORY


def test_pack_callbacks_pe32_is_null_terminated():
    packed = pack_tls_callbacks([0x1000, 0x1200], BASE, PeType.PE32)
    assert struct.unpack("<III", packed) == (BASE + 0x1000, BASE + 0x1200, 0)


def test_pack_callbacks_pe64_uses_qwords():
    base = 0x140000000
    packed = pack_tls_callbacks([0x1000], base, PeType.PE64)
    assert struct.unpack("<QQ", packed) == (base + 0x1000, 0)


def test_pack_no_callbacks_is_only_terminator():
    assert pack_tls_callbacks([], BASE, PeType.PE32) == bytes(4)


def test_pack_callbacks_overflow_pe32():
    with pytest.raises(PeError):
        pack_tls_callbacks([0x10], 0xFFFFFFF8, PeType.PE32)