import pytest

from brokenithm.file_streamer import FileReader, FileStreamer


@pytest.fixture
def data_file(tmp_path):
    content = bytes(range(256)) * 4
    path = tmp_path / "data.bin"
    path.write_bytes(content)
    return path, content


def test_reader_file_size(data_file):
    path, content = data_file
    assert FileReader(path, cache_size=100).file_size == len(content)


def test_peek_hits_initial_cache(data_file):
    path, content = data_file
    reader = FileReader(path, cache_size=100)
    assert reader.peek(0) == content[:100]
    assert reader.peek(40) == content[40:100]


def test_peek_misses_outside_cache(data_file):
    path, _ = data_file
    reader = FileReader(path, cache_size=100)
    assert reader.peek(100) == b""
    assert reader.peek(500) == b""


def test_read_moves_cache(data_file):
    path, content = data_file
    reader = FileReader(path, cache_size=100)
    assert reader.read(300) == content[300:400]
    assert reader.peek(350) == content[350:400]
    assert reader.peek(0) == b""


def test_read_near_end_is_short(data_file):
    path, content = data_file
    reader = FileReader(path, cache_size=100)
    assert reader.read(len(content) - 24) == content[-24:]
    assert reader.read(len(content)) == b""


def test_chunks_round_trip(data_file):
    path, content = data_file
    reader = FileReader(path, cache_size=100)
    chunks = list(reader.chunks())
    assert b"".join(chunks) == content
    assert all(len(c) <= 100 for c in chunks)


def test_small_file_served_from_default_cache(tmp_path):
    path = tmp_path / "a.txt"
    path.write_bytes(b"hello")
    reader = FileReader(path)
    assert reader.peek(0) == b"hello"
    assert list(reader.chunks()) == [b"hello"]


def test_empty_file_has_no_chunks(tmp_path):
    path = tmp_path / "empty"
    path.write_bytes(b"")
    assert list(FileReader(path).chunks()) == []


def test_invalid_arguments(data_file):
    path, _ = data_file
    with pytest.raises(ValueError):
        FileReader(path, cache_size=0)
    with pytest.raises(ValueError):
        FileReader(path).read(-1)


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        FileReader(tmp_path / "nope")


@pytest.fixture
def www(tmp_path):
    root = tmp_path / "www"
    (root / "js").mkdir(parents=True)
    (root / "index.html").write_bytes(b"<html></html>")
    (root / "app.js").write_bytes(b"let x = 1;")
    (root / "js" / "lib.js").write_bytes(b"lib")
    return root


def test_streamer_with_trailing_slash_uses_relative_urls(www):
    streamer = FileStreamer(str(www) + "/")
    assert sorted(streamer.readers) == ["app.js", "index.html", "js/lib.js"]
    assert streamer.read("index.html") == b"<html></html>"


def test_streamer_without_trailing_slash_maps_index_to_root(www):
    streamer = FileStreamer(www)
    assert sorted(streamer.readers) == ["/", "/app.js", "/js/lib.js"]
    assert streamer.read("/") == b"<html></html>"
    assert streamer.read("/js/lib.js") == b"lib"


def test_streamer_find_missing_returns_none(www):
    streamer = FileStreamer(www)
    assert streamer.find("/missing.js") is None
    with pytest.raises(FileNotFoundError):
        streamer.read("/missing.js")


def test_streamer_reads_large_file_in_chunks(tmp_path):
    content = b"0123456789" * 50
    (tmp_path / "big.bin").write_bytes(content)
    streamer = FileStreamer(str(tmp_path) + "/", cache_size=64)
    assert streamer.read("big.bin") == content


def test_update_root_cache_picks_up_new_files(www):
    streamer = FileStreamer(www)
    (www / "favicon.ico").write_bytes(b"icon")
    streamer.update_root_cache()
    assert streamer.read("/favicon.ico") == b"icon"