import pytest

from blocstore.blockfile import BlockFile
from blocstore.blockformat import (
    BLOCK_HEADER_SIZE,
    FILE_HEADER_SIZE,
    STRUCT_HEADER_SIZE,
)
from blocstore.errors import ErrorCode, FileError


@pytest.fixture
def store(tmp_path):
    bf = BlockFile(tmp_path / "data.blc")
    bf.create()
    return bf


@pytest.fixture
def filled(store):
    store.create_block("alpha")
    store.create_part("alpha", "one")
    store.create_part("alpha", "two")
    store.create_block("beta")
    store.create_part("beta", "three")
    return store


def _code(excinfo):
    return excinfo.value.code


def test_create_writes_header(store):
    with open(store.path, "rb") as handle:
        assert handle.read() == b"BLOCDATAdage0324"


def test_empty_path_rejected():
    with pytest.raises(FileError) as excinfo:
        BlockFile("")
    assert _code(excinfo) == ErrorCode.NO_FILE_NAME


def test_create_block_grows_file(store):
    store.create_block("alpha")
    import os

    assert os.path.getsize(store.path) == FILE_HEADER_SIZE + BLOCK_HEADER_SIZE
    assert store.list_blocks() == ["alpha"]
    assert store.block_size("alpha") == BLOCK_HEADER_SIZE


def test_duplicate_block(store):
    store.create_block("alpha")
    with pytest.raises(FileError) as excinfo:
        store.create_block("alpha")
    assert _code(excinfo) == ErrorCode.BLOCK_EXISTS


def test_empty_names(store):
    with pytest.raises(FileError) as excinfo:
        store.create_block("")
    assert _code(excinfo) == ErrorCode.EMPTY_BLOCK_NAME
    store.create_block("alpha")
    with pytest.raises(FileError) as excinfo:
        store.create_part("alpha", "")
    assert _code(excinfo) == ErrorCode.EMPTY_PART_NAME


def test_list_blocks_empty(store):
    with pytest.raises(FileError) as excinfo:
        store.list_blocks()
    assert _code(excinfo) == ErrorCode.BLOCK_NOT_FOUND


def test_first_block(filled):
    assert filled.first_block() == "alpha"


def test_first_block_without_blocks(store):
    with pytest.raises(FileError) as excinfo:
        store.first_block()
    assert _code(excinfo) == ErrorCode.BLOCK_NOT_FOUND


def test_create_part_missing_block(store):
    with pytest.raises(FileError) as excinfo:
        store.create_part("ghost", "p")
    assert _code(excinfo) == ErrorCode.BLOCK_NOT_FOUND


def test_duplicate_part(filled):
    with pytest.raises(FileError) as excinfo:
        filled.create_part("alpha", "one")
    assert _code(excinfo) == ErrorCode.PART_EXISTS


def test_list_parts(filled):
    assert filled.list_parts("alpha") == ["one", "two"]
    assert filled.list_parts("beta") == ["three"]
    assert filled.list_blocks() == ["alpha", "beta"]


def test_list_parts_errors(store):
    store.create_block("alpha")
    with pytest.raises(FileError) as excinfo:
        store.list_parts("alpha")
    assert _code(excinfo) == ErrorCode.PART_NOT_FOUND
    with pytest.raises(FileError) as excinfo:
        store.list_parts("ghost")
    assert _code(excinfo) == ErrorCode.BLOCK_NOT_FOUND
    with pytest.raises(FileError) as excinfo:
        store.list_parts("")
    assert _code(excinfo) == ErrorCode.EMPTY_BLOCK_NAME


def test_create_with_part(tmp_path):
    bf = BlockFile(tmp_path / "new.blc")
    bf.create_with_part("main", "first")
    assert bf.list_blocks() == ["main"]
    assert bf.list_parts("main") == ["first"]
    assert bf.part_size("main", "first") == BLOCK_HEADER_SIZE


def test_add_and_read_structs(filled):
    filled.add_struct("alpha", "one", "rec", b"first")
    filled.add_struct("alpha", "one", "rec", b"second")
    filled.add_struct("alpha", "one", "other", b"x")
    assert filled.read_struct("alpha", "one", "rec") == b"first"
    assert filled.read_struct("alpha", "one", "rec", 1) == b"second"
    assert filled.read_struct("alpha", "one", "other") == b"x"


def test_sizes_follow_structs(filled):
    before = filled.block_size("alpha")
    payload = b"payload"
    filled.add_struct("alpha", "one", "rec", payload)
    grown = STRUCT_HEADER_SIZE + len(payload)
    assert filled.part_size("alpha", "one") == BLOCK_HEADER_SIZE + grown
    assert filled.block_size("alpha") == before + grown


def test_later_blocks_survive_insertions(filled):
    filled.add_struct("beta", "three", "b", b"beta data")
    filled.add_struct("alpha", "two", "a", b"alpha data")
    filled.add_struct("alpha", "one", "a", b"first part")
    assert filled.read_struct("beta", "three", "b") == b"beta data"
    assert filled.read_struct("alpha", "two", "a") == b"alpha data"
    assert filled.read_struct("alpha", "one", "a") == b"first part"
    assert filled.list_parts("alpha") == ["one", "two"]
    assert filled.list_blocks() == ["alpha", "beta"]


def test_read_rank_out_of_range(filled):
    filled.add_struct("alpha", "one", "rec", b"a")
    with pytest.raises(FileError) as excinfo:
        filled.read_struct("alpha", "one", "rec", 1)
    assert _code(excinfo) == ErrorCode.STRUCT_RANK_OUT_OF_RANGE


def test_read_unknown_struct(filled):
    filled.add_struct("alpha", "one", "rec", b"a")
    with pytest.raises(FileError) as excinfo:
        filled.read_struct("alpha", "one", "nope")
    assert _code(excinfo) == ErrorCode.STRUCT_NOT_FOUND


def test_read_unknown_part(filled):
    with pytest.raises(FileError) as excinfo:
        filled.read_struct("alpha", "ghost", "rec")
    assert _code(excinfo) == ErrorCode.PART_NOT_FOUND


def test_read_empty_struct_name(filled):
    with pytest.raises(FileError) as excinfo:
        filled.read_struct("alpha", "one", "")
    assert _code(excinfo) == ErrorCode.EMPTY_STRUCT_NAME


def test_modify_missing_without_create(filled):
    with pytest.raises(FileError) as excinfo:
        filled.modify_struct("alpha", "one", "rec", 0, b"x")
    assert _code(excinfo) == ErrorCode.STRUCT_NOT_FOUND


def test_modify_missing_with_create(filled):
    filled.modify_struct("alpha", "one", "rec", 0, b"created", create_missing=True)
    assert filled.read_struct("alpha", "one", "rec") == b"created"


def test_iter_structs(filled):
    filled.add_struct("alpha", "one", "rec", b"1")
    filled.add_struct("alpha", "one", "other", b"2")
    filled.add_struct("alpha", "one", "rec", b"3")
    assert list(filled.iter_structs("alpha", "one", "rec")) == [b"1", b"3"]
    assert list(filled.iter_structs("alpha", "two", "rec")) == []


def test_find_struct(filled):
    filled.add_struct("alpha", "one", "rec", b"apple")
    filled.add_struct("alpha", "one", "rec", b"pear")
    filled.add_struct("alpha", "one", "rec", b"plum")
    assert filled.find_struct("alpha", "one", lambda name, data: data == b"plum") == 2
    assert filled.find_struct("alpha", "one", lambda name, data: data == b"fig") is None


def test_block_exists_and_size(filled):
    assert filled.block_exists("beta") is True
    assert filled.block_exists("gamma") is False
    assert filled.block_exists("") is False
    assert filled.block_size("gamma") == 0
    assert filled.block_size("beta") == 2 * BLOCK_HEADER_SIZE


def test_long_names_are_truncated(store):
    long_name = "x" * 40
    store.create_block(long_name)
    assert store.list_blocks() == [long_name[:32]]
    assert store.block_exists("x" * 32 + "other") is True


def test_missing_file(tmp_path):
    bf = BlockFile(tmp_path / "absent.blc")
    with pytest.raises(FileError) as excinfo:
        bf.list_blocks()
    assert _code(excinfo) == ErrorCode.OPEN_FAILED


def test_not_a_block_file(tmp_path):
    path = tmp_path / "other.bin"
    path.write_bytes(b"NOTBLOCKFILEHEAD")
    with pytest.raises(FileError) as excinfo:
        BlockFile(path).list_blocks()
    assert _code(excinfo) == ErrorCode.NOT_A_BLOCK_FILE


def test_short_header(tmp_path):
    path = tmp_path / "short.bin"
    path.write_bytes(b"BLOC")
    with pytest.raises(FileError) as excinfo:
        BlockFile(path).first_block()
    assert _code(excinfo) == ErrorCode.HEADER_READ_FAILED