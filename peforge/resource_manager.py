"""Editing of a resource tree: adding, replacing and removing resources."""

from __future__ import annotations

from .resource_viewer import ResourceViewer
from .resources import (
    ResourceDataEntry,
    ResourceDirectory,
    ResourceDirectoryEntry,
    ResourceKey,
    entry_matches,
)


def _new_entry(key: ResourceKey) -> ResourceDirectoryEntry:
    entry = ResourceDirectoryEntry()
    if isinstance(key, str):
        entry.set_name(key)
    else:
        entry.set_id(int(key))
    return entry


def _index_of(directory: ResourceDirectory, key: ResourceKey) -> int | None:
    return next(
        (i for i, entry in enumerate(directory.entries) if entry_matches(entry, key)),
        None,
    )


class ResourceManager(ResourceViewer):
    """A resource viewer that can also change the resource tree.

    ``root`` arguments are a resource type ID or a root name; ``name``
    arguments are a resource name or ID.
    """

    def remove_resource_type(self, root: ResourceKey) -> bool:
        """Remove the first root entry matching ``root``; True if one was removed."""
        index = _index_of(self.root_directory, root)
        if index is None:
            return False
        del self.root_directory.entries[index]
        return True

    def remove_resource(
        self,
        root: ResourceKey,
        name: ResourceKey | None = None,
        language: int | None = None,
    ) -> bool:
        """Remove a whole root, one resource, or one language of a resource.

        Directories left empty by the removal are removed too. Returns True
        if something was removed.
        """
        if name is None:
            return self.remove_resource_type(root)

        root_entries = self.root_directory.entries
        root_index = _index_of(self.root_directory, root)
        if root_index is None:
            return False
        name_directory = root_entries[root_index].resource_directory()

        name_index = _index_of(name_directory, name)
        if name_index is None:
            return False

        if language is not None:
            language_directory = name_directory.entries[name_index].resource_directory()
            language_index = _index_of(language_directory, int(language))
            if language_index is None:
                return False
            del language_directory.entries[language_index]
            if language_directory.entries:
                return True

        del name_directory.entries[name_index]
        if not name_directory.entries:
            del root_entries[root_index]
        return True

    def add_resource(
        self,
        data: bytes,
        root: ResourceKey,
        name: ResourceKey,
        language: int,
        codepage: int = 0,
        timestamp: int = 0,
    ) -> None:
        """Add a resource, replacing an existing one with the same language.

        ``timestamp`` is given to directories that have to be created.
        """
        directory = self.root_directory
        for key in (root, name):
            entry = directory.find(key)
            if entry is None:
                entry = _new_entry(key)
                entry.add_resource_directory(ResourceDirectory(timestamp=timestamp))
                directory.entries.append(entry)
            directory = entry.resource_directory()

        index = _index_of(directory, int(language))
        if index is not None:
            del directory.entries[index]

        data_entry = ResourceDirectoryEntry()
        data_entry.add_data_entry(ResourceDataEntry(bytes(data), codepage))
        data_entry.set_id(int(language))
        directory.entries.append(data_entry)