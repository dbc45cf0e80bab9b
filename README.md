# peforge

A pure-Python library for the building blocks of Portable Executable
(PE32 and PE32+) images: section headers and data, the "Rich" records in
the DOS stub, base relocation blocks, TLS directories and the in-memory
resource tree with bitmap resources.

It has no dependencies outside the standard library.

## Installation

```
pip install peforge
```

## Modules

- `peforge.structures`: the `PeType` enum (`PE32`, `PE64`), `align_up`,
  the `PeError` exception with its `ErrorCode`, format constants
  (`IMAGE_SCN_*`, `IMAGE_DIRECTORY_ENTRY_*`, `IMAGE_REL_BASED_*` and others)
  and the binary structures `SectionHeader`, `TlsDirectory`,
  `BitmapFileHeader` (each with `pack`/`unpack`) and `BitmapInfoHeader`
  (`unpack`).
- `peforge.section`: `Section`, a section header plus raw data. It has a
  `name` property, properties for the `readable`, `writeable`, `executable`,
  `shared` and `discardable` flags, `set_flag`, `empty`, `get_raw_data`,
  `set_raw_data`, `get_virtual_data` (data zero-padded to the aligned virtual
  size), `aligned_virtual_size`, `aligned_raw_size` and `contains_raw_offset`.
- `peforge.rich_data`: `get_rich_data(stub_overlay)` decodes the records of
  the "Rich" block into `RichData(number, version, times)` items, or returns
  an empty list if there is none.
- `peforge.relocations`: `RelocationEntry`, `RelocationTable` and
  `ImageBaseRelocation`; `parse_relocation_tables(data, list_absolute_entries)`
  reads a relocation directory, `pack_relocation_tables(tables, offset)`
  returns the DWORD-aligned start offset and the directory bytes, and
  `rebase_image(memory, tables, image_base, new_base, pe_type)` applies the
  relocations in place to a bytearray indexed by RVA.
- `peforge.tls`: `TlsInfo`, TLS information with RVAs, converted to and from
  a `TlsDirectory` with `to_directory(image_base)` and
  `TlsInfo.from_directory(directory, image_base)`;
  `pack_tls_callbacks(callbacks, image_base, pe_type)` builds the
  null-terminated callback VA array.
- `peforge.resources`: the resource tree: `ResourceDirectory`,
  `ResourceDirectoryEntry` (named or with an ID, holding a directory or a
  data entry), `ResourceDataEntry` and `entry_matches(entry, key)`. A key is
  a string for a name or an integer for an ID.
- `peforge.resource_viewer`: `ResourceType` and `ResourceViewer`, which lists
  types, names, IDs and languages, counts resources and returns
  `ResourceDataInfo` by language or by index.
- `peforge.resource_manager`: `ResourceManager`, a viewer that also adds,
  replaces and removes resources, removing directories left empty.
- `peforge.bitmap_reader`, `peforge.bitmap_writer`: `create_bitmap`,
  `BitmapReader` and `BitmapWriter` turn bitmap resources into complete
  `.bmp` file data and back.

## Example

```python
from peforge.resources import ResourceDirectory
from peforge.resource_manager import ResourceManager
from peforge.resource_viewer import ResourceType
from peforge.bitmap_reader import BitmapReader

root = ResourceDirectory()
manager = ResourceManager(root)
manager.add_resource(b"\x00" * 40, ResourceType.BITMAP, 1, 1033, 0, 0)

print(manager.list_resource_ids(ResourceType.BITMAP))    # [1]
bmp = BitmapReader(manager).get_bitmap(1, 0)            # a complete .bmp file
```

Errors raised by the library are `peforge.structures.PeError`. Its `code`
attribute holds an `ErrorCode` that says what went wrong.

## What it does not do

peforge works on the pieces you hand it. It does not open, parse or write
whole PE files, rebuild image headers or place directories into sections of
an image. It also does not read or write the binary form of the resource
directory: the resource tree exists only in memory.

## Running the tests

```
pip install -e ".[test]"
pytest
```