import pytest

from trainsearch.xml_generator import XmlGenerator


class ChunkGenerator(XmlGenerator):
    """Emits one batch of pieces per generate_more call."""

    def __init__(self, batches):
        super().__init__()
        self._batches = list(batches)
        self.calls = 0

    def generate_more(self):
        self.calls += 1
        if self._batches:
            for piece in self._batches.pop(0):
                self._add_to_output(piece)

    def restart(self, batches):
        self._internal_reset()
        self._batches = list(batches)


BATCHES = [["<a>", "hello"], [42, "</a>"], [""], ["<b/>"]]
EXPECTED = b"<a>hello42</a><b/>"


def whole(gen, chunk=1024):
    out = bytearray()
    offset = 0
    while True:
        data = XmlGenerator.read(gen, offset, chunk)
        out += data
        offset += len(data)
        if len(data) < chunk:
            return bytes(out)


def test_full_read_concatenates_pieces_and_renders_integers():
    gen = ChunkGenerator(BATCHES)
    assert XmlGenerator.read(gen, 0, 1000) == EXPECTED


@pytest.mark.parametrize("chunk", [1, 2, 3, 5, 7])
def test_chunked_reads_equal_full_read(chunk):
    gen = ChunkGenerator(BATCHES)
    assert whole(gen, chunk) == EXPECTED
    assert XmlGenerator.read(gen, len(EXPECTED), chunk) == b""


def test_read_at_eof_is_empty():
    gen = ChunkGenerator(BATCHES)
    XmlGenerator.read(gen, 0, 1000)
    assert XmlGenerator.read(gen, len(EXPECTED), 10) == b""


def test_forward_skip_reads_from_offset():
    gen = ChunkGenerator(BATCHES)
    assert XmlGenerator.read(gen, 5, 4) == EXPECTED[5:9]
    assert XmlGenerator.read(gen, 9, 100) == EXPECTED[9:]


def test_file_offset_advances_only_past_consumed_pieces():
    gen = ChunkGenerator(BATCHES)
    assert gen.file_offset == 0
    assert XmlGenerator.read(gen, 0, 2) == b"<a"
    assert gen.file_offset == 0
    assert XmlGenerator.read(gen, 0, 3) == b"<a>"
    assert gen.file_offset == len(b"<a>")


def test_reread_within_retained_piece():
    gen = ChunkGenerator(BATCHES)
    XmlGenerator.read(gen, 0, 5)
    assert XmlGenerator.read(gen, 3, 5) == EXPECTED[3:8]


def test_read_before_retained_data_raises():
    gen = ChunkGenerator(BATCHES)
    XmlGenerator.read(gen, 0, 1000)
    with pytest.raises(ValueError):
        XmlGenerator.read(gen, 0, 1)


def test_internal_reset_restarts_document():
    gen = ChunkGenerator(BATCHES)
    XmlGenerator.read(gen, 0, 1000)
    gen.restart([["xyz"]])
    assert gen.file_offset == 0
    assert XmlGenerator.read(gen, 0, 100) == b"xyz"


def test_empty_generator_returns_nothing():
    gen = ChunkGenerator([])
    assert XmlGenerator.read(gen, 0, 10) == b""
    assert gen.calls == 1