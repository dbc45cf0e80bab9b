"""Storing bitmap files as bitmap resources."""

from __future__ import annotations

from .resource_manager import ResourceManager
from .resource_viewer import ResourceType
from .resources import ResourceKey
from .structures import BitmapFileHeader, ErrorCode, PeError


class BitmapWriter:
    """Adds and removes bitmap resources."""

    def __init__(self, manager: ResourceManager) -> None:
        self.manager = manager

    def add_bitmap(
        self,
        bitmap_file: bytes,
        name: ResourceKey,
        language: int,
        codepage: int = 0,
        timestamp: int = 0,
    ) -> None:
        """Add a bitmap file as a resource, replacing an existing one.

        The file header is stripped; ``timestamp`` is given to new directories.
        """
        bitmap_file = bytes(bitmap_file)
        if len(bitmap_file) < BitmapFileHeader.SIZE:
            raise PeError("Incorrect resource bitmap", ErrorCode.RESOURCE_INCORRECT_BITMAP)
        self.manager.add_resource(
            bitmap_file[BitmapFileHeader.SIZE:],
            ResourceType.BITMAP,
            name,
            language,
            codepage,
            timestamp,
        )

    def remove_bitmap(self, name: ResourceKey, language: int) -> bool:
        """Remove a bitmap by name or ID and language; True if it existed."""
        return self.manager.remove_resource(ResourceType.BITMAP, name, language)