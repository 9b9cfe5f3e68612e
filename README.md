# blocstore

A small library for three kinds of files:

- **Block files** (`blocstore.blockfile`): a binary container with a
  16-byte header, followed by named *blocks*. Each block holds named
  *parts*, and each part holds a sequence of named *structures* (payloads
  of any length). Names are stored as 32-byte tags; longer names are cut
  to 32 bytes. Block and part headers carry the size of their contents,
  so the file is walked without an index.
- **Record files** (`blocstore.records.RecordFile`): binary files made of
  fixed-size records that can be read, appended, overwritten, inserted and
  deleted by index.
- **Text files** (`blocstore.records.TextFile`): line-oriented files with
  1-based line editing.

It also provides a few helpers: `Point` (`blocstore.point`),
`StringList` (`blocstore.stringlist`), the `FileName` path description
with `describe` and `describe_full` (`blocstore.pathinfo`), and byte-moving
functions for open binary files (`blocstore.fileops`: `insert_bytes`,
`shrink`, `extend`, `resize`, `integrate_file`).

## Installation

```
pip install blocstore
```

## Block files

```python
from blocstore.blockfile import BlockFile

store = BlockFile("data.bloc")
store.create()
store.create_block("settings")
store.create_part("settings", "fonts")
store.add_struct("settings", "fonts", "font", b"Sans 12")
store.add_struct("settings", "fonts", "font", b"Mono 10")

store.read_struct("settings", "fonts", "font", 1)   # b"Mono 10"
store.modify_struct("settings", "fonts", "font", 0, b"Serif 14", False)

for payload in store.iter_structs("settings", "fonts", "font"):
    print(payload)

store.list_blocks()              # ["settings"]
store.list_parts("settings")     # ["fonts"]
```

Structures sharing a name inside a part are told apart by their rank,
counted from 0 in file order. `modify_struct` resizes a structure when the
new payload has another length; with `create_missing=True` a missing
structure is appended instead. `find_struct` returns the position of the
first structure for which `predicate(name, payload)` is true.
`first_block`, `block_exists`, `block_size` and `part_size` inspect the
file.

Failures raise `blocstore.errors.FileError`, whose `code` is an
`ErrorCode` member (for example `BLOCK_EXISTS` or `PART_NOT_FOUND`).

The on-disk layout is available in `blocstore.blockformat`:
`FileHeader`, `BlockHeader`, `StructHeader`, `Address`, `encode_tag` and
`decode_tag`. All integers are little-endian.

## Record and text files

```python
from blocstore.records import RecordFile, TextFile

records = RecordFile("items.bin", 8)
records.create_empty()
records.append(b"AAAAAAAA")
records.insert(0, b"BBBBBBBB")
list(records)                    # [b"BBBBBBBB", b"AAAAAAAA"]

text = TextFile("notes.txt")
text.create_empty()
text.append_line("first")
text.append_line("third")
text.insert_line(2, "second")
text.read_line(2)                # "second"
```

## What it does not do

This is a library only: it has no command-line tool and no user
interface. Block files can be created and grown, and structures modified,
but there is no operation to delete a structure, a part or a block.

## Running the tests

```
pip install -e .[test]
pytest
```