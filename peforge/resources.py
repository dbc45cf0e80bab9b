"""In-memory tree of PE resources: directories, entries and data."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from .structures import ErrorCode, PeError

ResourceKey = Union[int, str]


@dataclass
class ResourceDataEntry:
    """Leaf of the resource tree: the resource bytes and their codepage."""

    data: bytes = b""
    codepage: int = 0


class ResourceDirectoryEntry:
    """An entry of a resource directory, identified by ID or by name.

    It holds either a nested resource directory or a data entry.
    """

    def __init__(self) -> None:
        self._id = 0
        self._name = ""
        self._named = False
        self._content: ResourceDirectory | ResourceDataEntry | None = None

    def __repr__(self) -> str:
        key = repr(self._name) if self._named else str(self._id)
        return f"ResourceDirectoryEntry({key}, {self._content!r})"

    @property
    def id(self) -> int:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_named(self) -> bool:
        return self._named

    def set_name(self, name: str) -> None:
        self._name = name
        self._named = True
        self._id = 0

    def set_id(self, entry_id: int) -> None:
        self._id = entry_id
        self._named = False
        self._name = ""

    def add_data_entry(self, entry: ResourceDataEntry) -> None:
        self._content = entry

    def add_resource_directory(self, directory: ResourceDirectory) -> None:
        self._content = directory

    def includes_data(self) -> bool:
        return isinstance(self._content, ResourceDataEntry)

    def resource_directory(self) -> ResourceDirectory:
        """Return the nested directory; raise PeError if there is none."""
        if not isinstance(self._content, ResourceDirectory):
            raise PeError(
                "Resource directory entry does not contain resource directory",
                ErrorCode.RESOURCE_DIRECTORY_ENTRY_ERROR,
            )
        return self._content

    def data_entry(self) -> ResourceDataEntry:
        """Return the data entry; raise PeError if there is none."""
        if not isinstance(self._content, ResourceDataEntry):
            raise PeError(
                "Resource directory entry does not contain resource data entry",
                ErrorCode.RESOURCE_DIRECTORY_ENTRY_ERROR,
            )
        return self._content


def entry_matches(entry: ResourceDirectoryEntry, key: ResourceKey) -> bool:
    """True if ``entry`` is identified by ``key`` (a name string or an integer ID)."""
    if isinstance(key, str):
        return entry.is_named and entry.name == key
    return not entry.is_named and entry.id == key


@dataclass
class ResourceDirectory:
    """A resource directory with its header fields and entries."""

    characteristics: int = 0
    timestamp: int = 0
    major_version: int = 0
    minor_version: int = 0
    number_of_named_entries: int = 0
    number_of_id_entries: int = 0
    entries: list[ResourceDirectoryEntry] = field(default_factory=list)

    def add_resource_directory_entry(self, entry: ResourceDirectoryEntry) -> None:
        self.entries.append(entry)
        if entry.is_named:
            self.number_of_named_entries += 1
        else:
            self.number_of_id_entries += 1

    def clear_resource_directory_entry_list(self) -> None:
        self.entries.clear()
        self.number_of_named_entries = 0
        self.number_of_id_entries = 0

    def find(self, key: ResourceKey) -> ResourceDirectoryEntry | None:
        """Return the first entry matching ``key``, or None."""
        return next((entry for entry in self.entries if entry_matches(entry, key)), None)

    def _lookup(self, key: ResourceKey) -> ResourceDirectoryEntry:
        entry = self.find(key)
        if entry is None:
            raise PeError(
                "Resource directory entry not found",
                ErrorCode.RESOURCE_DIRECTORY_ENTRY_NOT_FOUND,
            )
        return entry

    def entry_by_id(self, entry_id: int) -> ResourceDirectoryEntry:
        return self._lookup(int(entry_id))

    def entry_by_name(self, name: str) -> ResourceDirectoryEntry:
        return self._lookup(str(name))