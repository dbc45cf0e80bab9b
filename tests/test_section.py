import pytest

from peforge.section import Section
from peforge.structures import (
    IMAGE_SCN_MEM_EXECUTE,
    IMAGE_SCN_MEM_READ,
    IMAGE_SCN_MEM_WRITE,
)


def test_name_is_truncated_to_eight_bytes():
    section = Section("abcdefghij")
    assert section.name == "abcdefgh"
    assert section.header.name == b"abcdefgh"


def test_short_name_is_padded_in_header():
    section = Section(".rsrc")
    assert section.name == ".rsrc"
    assert len(section.header.name) == 8
    assert section.header.name.startswith(b".rsrc\0")


def test_flags_set_and_clear():
    section = Section()
    section.readable = True
    section.executable = True
    assert section.characteristics == IMAGE_SCN_MEM_READ | IMAGE_SCN_MEM_EXECUTE
    assert section.readable and section.executable and not section.writeable
    section.executable = False
    assert section.characteristics == IMAGE_SCN_MEM_READ


def test_set_flag_is_chainable():
    section = Section()
    result = section.set_flag(IMAGE_SCN_MEM_WRITE).set_flag(IMAGE_SCN_MEM_READ)
    assert result is section
    assert section.writeable and section.readable


def test_shared_and_discardable():
    section = Section()
    section.shared = True
    section.discardable = True
    assert section.shared and section.discardable
    section.shared = False
    assert not section.shared and section.discardable


def test_empty_section():
    assert Section().empty()
    assert not Section(raw_data=b"x").empty()


def test_virtual_data_is_padded_and_unmapped():
    section = Section(raw_data=b"abc")
    section.virtual_size = 0x10
    virtual = section.get_virtual_data(0x10)
    assert len(virtual) == 0x10
    assert virtual[:3] == b"abc"
    assert set(virtual[3:]) == {0}
    assert bytes(section.get_raw_data()) == b"abc"


def test_changes_through_virtual_data_persist():
    section = Section(raw_data=b"abc")
    section.virtual_size = 0x20
    section.get_virtual_data(0x10)[0] = ord("z")
    assert bytes(section.get_raw_data()) == b"zbc"


def test_empty_while_mapped_reflects_raw_length():
    section = Section()
    section.virtual_size = 0x10
    assert len(section.get_virtual_data(0x10)) == 0x10
    assert section.empty()


def test_set_raw_data_replaces_mapping():
    section = Section(raw_data=b"ab")
    section.virtual_size = 0x10
    section.get_virtual_data(0x10)
    section.set_raw_data(b"xyz")
    assert bytes(section.get_raw_data()) == b"xyz"


def test_aligned_virtual_size_uses_raw_size_when_virtual_is_zero():
    section = Section()
    section.size_of_raw_data = 0x300
    assert section.aligned_virtual_size(0x1000) == section.aligned_raw_size(0x1000)
    assert section.aligned_virtual_size(0x1000) % 0x1000 == 0
    assert section.aligned_virtual_size(0x1000) >= 0x300


def test_aligned_virtual_size_prefers_virtual_size():
    section = Section()
    section.size_of_raw_data = 0x3000
    section.virtual_size = 0x1000
    assert section.aligned_virtual_size(0x1000) == 0x1000


def test_aligned_raw_size_zero_without_raw_data():
    section = Section()
    section.virtual_size = 0x500
    assert section.aligned_raw_size(0x200) == 0


@pytest.mark.parametrize(
    "offset, expected",
    [(0x3FF, False), (0x400, True), (0x5FF, True), (0x600, False)],
)
def test_contains_raw_offset(offset, expected):
    section = Section()
    section.pointer_to_raw_data = 0x400
    section.size_of_raw_data = 0x200
    assert section.contains_raw_offset(offset) is expected