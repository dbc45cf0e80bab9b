"""Reading bitmap resources back as complete bitmap files."""

from __future__ import annotations

from .resource_viewer import ResourceType, ResourceViewer
from .resources import ResourceKey
from .structures import (
    BITMAP_SIGNATURE,
    BitmapFileHeader,
    BitmapInfoHeader,
    ErrorCode,
    PeError,
)

_MAX_DWORD = 0xFFFFFFFF


def create_bitmap(resource_data: bytes) -> bytes:
    """Prepend a bitmap file header to bitmap resource data.

    Only the info header is checked; raises PeError if it is truncated.
    """
    resource_data = bytes(resource_data)
    if len(resource_data) < BitmapInfoHeader.SIZE:
        raise PeError("Incorrect resource bitmap", ErrorCode.RESOURCE_INCORRECT_BITMAP)

    info = BitmapInfoHeader.unpack(resource_data)
    off_bits = BitmapFileHeader.SIZE + BitmapInfoHeader.SIZE
    if info.bi_clr_used:
        off_bits += 4 * info.bi_clr_used
    elif info.bi_bit_count <= 8:
        off_bits += 4 * (1 << info.bi_bit_count)

    header = BitmapFileHeader(
        bf_type=BITMAP_SIGNATURE,
        bf_size=(BitmapFileHeader.SIZE + len(resource_data)) & _MAX_DWORD,
        bf_off_bits=off_bits & _MAX_DWORD,
    )
    return header.pack() + resource_data


class BitmapReader:
    """Extracts bitmap resources as bitmap files."""

    def __init__(self, viewer: ResourceViewer) -> None:
        self.viewer = viewer

    def get_bitmap(self, name: ResourceKey, index: int = 0) -> bytes:
        """Bitmap by name or ID and index in its language directory."""
        info = self.viewer.get_resource_data_by_index(ResourceType.BITMAP, name, index)
        return create_bitmap(info.data)

    def get_bitmap_lang(self, language: int, name: ResourceKey) -> bytes:
        """Bitmap by name or ID and language."""
        info = self.viewer.get_resource_data(ResourceType.BITMAP, name, language)
        return create_bitmap(info.data)