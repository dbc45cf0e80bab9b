import struct

from peforge.rich_data import RichData, get_rich_data

KEY = 0x1BADF00D


def _build_stub(records, key=KEY, prefix=b"\x0e\x1f\xba\x0e"):
    words = [0x536E6144 ^ key, key, key, key]
    for number, version, times in records:
        words.append(((number << 16) | version) ^ key)
        words.append(times ^ key)
    body = b"".join(struct.pack("<I", w) for w in words)
    return prefix + body + b"Rich" + struct.pack("<I", key) + b"\0" * 8


def test_decodes_records():
    stub = _build_stub([(0x5D, 0x7809, 7), (0x01, 0x0000, 0x2A)])
    assert get_rich_data(stub) == [
        RichData(0x5D, 0x7809, 7),
        RichData(0x01, 0x0000, 0x2A),
    ]


def test_single_record_with_other_key():
    stub = _build_stub([(0x104, 0x6030, 3)], key=0xA5A5A5A5)
    assert get_rich_data(stub) == [RichData(0x104, 0x6030, 3)]


def test_empty_block_gives_no_records():
    assert get_rich_data(_build_stub([])) == []


def test_short_overlay():
    assert get_rich_data(b"Ri") == []


def test_no_rich_signature():
    assert get_rich_data(b"\0" * 64) == []


def test_rich_without_dans_signature():
    stub = b"\0" * 16 + b"Rich" + struct.pack("<I", KEY)
    assert get_rich_data(stub) == []


def test_rich_without_key():
    assert get_rich_data(b"\0" * 8 + b"Rich") == []


def test_accepts_bytearray():
    stub = bytearray(_build_stub([(2, 3, 4)]))
    assert get_rich_data(stub) == [RichData(2, 3, 4)]