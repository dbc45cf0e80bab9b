"""Read-only queries over a resource tree (type / name-or-ID / language)."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from .resources import ResourceDirectory, ResourceDirectoryEntry, ResourceKey
from .structures import ErrorCode, PeError


class ResourceType(enum.IntEnum):
    """Standard resource type IDs."""

    CURSOR = 1
    BITMAP = 2
    ICON = 3
    MENU = 4
    DIALOG = 5
    STRING = 6
    FONTDIR = 7
    FONT = 8
    ACCELERATOR = 9
    RCDATA = 10
    MESSAGE_TABLE = 11
    CURSOR_GROUP = 12
    ICON_GROUP = 14
    VERSION = 16
    DLGINCLUDE = 17
    PLUGPLAY = 19
    VXD = 20
    ANICURSOR = 21
    ANIICON = 22
    HTML = 23
    MANIFEST = 24


@dataclass(frozen=True)
class ResourceDataInfo:
    """Resource bytes and their codepage."""

    data: bytes
    codepage: int


def _entry(directory: ResourceDirectory, key: ResourceKey) -> ResourceDirectoryEntry:
    if isinstance(key, str):
        return directory.entry_by_name(key)
    return directory.entry_by_id(key)


def _names(directory: ResourceDirectory) -> list[str]:
    return [entry.name for entry in directory.entries if entry.is_named]


def _ids(directory: ResourceDirectory) -> list[int]:
    return [entry.id for entry in directory.entries if not entry.is_named]


class ResourceViewer:
    """Queries over a root resource directory.

    ``root`` arguments are a resource type ID or a root name; ``name``
    arguments are a resource name or ID. Missing entries raise PeError.
    """

    def __init__(self, root_directory: ResourceDirectory) -> None:
        self.root_directory = root_directory

    def _name_directory(self, root: ResourceKey) -> ResourceDirectory:
        return _entry(self.root_directory, root).resource_directory()

    def _language_directory(self, root: ResourceKey, name: ResourceKey) -> ResourceDirectory:
        return _entry(self._name_directory(root), name).resource_directory()

    def list_resource_types(self) -> list[int]:
        """IDs of the root entries (named roots are not listed)."""
        return _ids(self.root_directory)

    def resource_exists(self, root: ResourceKey) -> bool:
        return self.root_directory.find(root) is not None

    def list_resource_names(self, root: ResourceKey) -> list[str]:
        return _names(self._name_directory(root))

    def list_resource_ids(self, root: ResourceKey) -> list[int]:
        return _ids(self._name_directory(root))

    def get_resource_count(self, root: ResourceKey) -> int:
        return len(self._name_directory(root).entries)

    def get_language_count(self, root: ResourceKey, name: ResourceKey) -> int:
        return len(_ids(self._language_directory(root, name)))

    def list_resource_languages(self, root: ResourceKey, name: ResourceKey) -> list[int]:
        return _ids(self._language_directory(root, name))

    def get_resource_data(
        self, root: ResourceKey, name: ResourceKey, language: int
    ) -> ResourceDataInfo:
        data = self._language_directory(root, name).entry_by_id(language).data_entry()
        return ResourceDataInfo(bytes(data.data), data.codepage)

    def get_resource_data_by_index(
        self, root: ResourceKey, name: ResourceKey, index: int = 0
    ) -> ResourceDataInfo:
        """Data of the ``index``-th entry of the language directory."""
        entries = self._language_directory(root, name).entries
        if index < 0 or index >= len(entries):
            raise PeError(
                "Resource data entry not found", ErrorCode.RESOURCE_DATA_ENTRY_NOT_FOUND
            )
        data = entries[index].data_entry()
        return ResourceDataInfo(bytes(data.data), data.codepage)