import xml.etree.ElementTree as ET

import pytest

from trainsearch.fdi_xml import FdiXmlGenerator, label_for_function
from trainsearch.traindb import TrainDbEntry
from trainsearch.traindb_defs import DccMode, Symbol


class FakeEntry(TrainDbEntry):
    def __init__(self, labels, max_fn):
        self._labels = labels
        self._max_fn = max_fn

    @property
    def identifier(self):
        return "fake"

    @property
    def traction_node(self):
        return 0

    @property
    def train_name(self):
        return "Fake"

    @property
    def train_description(self):
        return ""

    @property
    def legacy_address(self):
        return 3

    @property
    def legacy_drive_mode(self):
        return DccMode.DCC_28

    def function_label(self, fn_id):
        return self._labels.get(fn_id, Symbol.FN_NONEXISTANT)

    @property
    def max_fn(self):
        return self._max_fn

    def start_read_functions(self):
        pass


LABELS = {
    0: Symbol.LIGHT,
    1: Symbol.HORN,
    2: Symbol.FNT11,
    3: Symbol.FN_NONEXISTANT,
    4: Symbol.FN_UNINITIALIZED,
    5: Symbol.TELEX,
}


def render(entry, chunk=4096):
    gen = FdiXmlGenerator()
    gen.reset(entry)
    out = bytearray()
    offset = 0
    while True:
        data = gen.read(offset, chunk)
        out += data
        offset += len(data)
        if len(data) < chunk:
            return bytes(out)


def functions(doc):
    root = ET.fromstring(doc)
    return [
        (f.get("kind"), f.findtext("name"), int(f.findtext("number")))
        for f in root.iter("function")
    ]


def test_label_for_function_known_symbols():
    assert label_for_function(Symbol.LIGHT) == "Light"
    assert label_for_function(Symbol.TELEX) == "Coupler"


def test_label_for_function_ignores_momentary_bit():
    assert label_for_function(Symbol.HORN & ~Symbol.MOMENTARY) == label_for_function(
        Symbol.HORN
    )
    assert label_for_function(Symbol.LIGHT | Symbol.MOMENTARY) == "Light"


@pytest.mark.parametrize("fn_type", [Symbol.FNT11, Symbol.FN_NONEXISTANT, Symbol.FN_UNKNOWN])
def test_label_for_function_unlabelled(fn_type):
    assert label_for_function(fn_type) is None


def test_document_frame():
    doc = render(FakeEntry(LABELS, 5))
    assert doc.startswith(b"<?xml version='1.0' encoding='UTF-8'?>")
    assert doc.endswith(b"</group></segment></fdi>")
    root = ET.fromstring(doc)
    assert root.find("segment").get("space") == "249"


def test_functions_listed_with_kinds_names_and_numbers():
    doc = render(FakeEntry(LABELS, 5))
    assert functions(doc) == [
        ("binary", "Light", 0),
        ("momentary", "Horn", 1),
        ("binary", "F2", 2),
        ("momentary", "Coupler", 5),
    ]


def test_functions_beyond_max_fn_are_skipped():
    doc = render(FakeEntry(LABELS, 1))
    assert [number for _, _, number in functions(doc)] == [0, 1]


def test_train_without_functions():
    doc = render(FakeEntry({}, -1))
    assert functions(doc) == []
    assert doc.endswith(b"</group></segment></fdi>")


@pytest.mark.parametrize("chunk", [1, 7, 64])
def test_chunked_reads_match_full_document(chunk):
    entry = FakeEntry(LABELS, 5)
    assert render(entry, chunk) == render(entry)


def test_reset_restarts_for_new_entry():
    gen = FdiXmlGenerator()
    gen.reset(FakeEntry(LABELS, 5))
    gen.read(0, 10_000)
    gen.reset(FakeEntry({0: Symbol.BELL}, 0))
    assert gen.file_offset == 0
    doc = gen.read(0, 10_000)
    assert functions(doc) == [("binary", "Bell", 0)]


def test_read_before_reset_is_empty():
    assert FdiXmlGenerator().read(0, 100) == b""


def test_backward_read_raises():
    gen = FdiXmlGenerator()
    gen.reset(FakeEntry(LABELS, 5))
    gen.read(0, 10_000)
    with pytest.raises(ValueError):
        gen.read(0, 10)