"""Function Description Information (FDI) XML for a train."""

from __future__ import annotations

from collections.abc import Iterator

from trainsearch.traindb import TrainDbEntry
from trainsearch.traindb_defs import Symbol
from trainsearch.xml_generator import XmlGenerator

_FDI_HEAD = (
    "<?xml version='1.0' encoding='UTF-8'?>\n"
    "<?xml-stylesheet type='text/xsl' href='xslt/fdi.xsl'?>\n"
    "<fdi xmlns:xsi='http://www.w3.org/2001/XMLSchema-instance' "
    "xsi:noNamespaceSchemaLocation="
    "'http://openlcb.org/trunk/prototypes/xml/schema/fdi.xsd'>\n"
    "<segment space='249'><group><name/>\n"
)
_FDI_TAIL = "</group></segment></fdi>"
_BINARY_FUNCTION = "<function size='1' kind='binary'>\n"
_MOMENTARY_FUNCTION = "<function size='1' kind='momentary'>\n"

# FNT11 has no label of its own; it is rendered as "F<n>".
_LABELS: tuple[tuple[int, str], ...] = (
    (Symbol.LIGHT, "Light"),
    (Symbol.BEAMER, "Beamer"),
    (Symbol.BELL, "Bell"),
    (Symbol.HORN, "Horn"),
    (Symbol.SHUNT, "Shunt"),
    (Symbol.PANTO, "Pantgr"),
    (Symbol.SMOKE, "Smoke"),
    (Symbol.ABV, "Mom off"),
    (Symbol.WHISTLE, "Whistle"),
    (Symbol.SOUND, "Sound"),
    (Symbol.SPEECH, "Announce"),
    (Symbol.ENGINE, "Engine"),
    (Symbol.LIGHT1, "Light1"),
    (Symbol.LIGHT2, "Light2"),
    (Symbol.TELEX, "Coupler"),
)

_NOT_PRESENT = (Symbol.FN_NONEXISTANT, Symbol.FN_UNINITIALIZED)


def label_for_function(fn_type: int) -> str | None:
    """Display label for a function symbol, ignoring the momentary bit.

    Returns ``None`` when the symbol has no label of its own.
    """
    wanted = fn_type & ~Symbol.MOMENTARY
    for symbol, label in _LABELS:
        if symbol & ~Symbol.MOMENTARY == wanted:
            return label
    return None


class FdiXmlGenerator(XmlGenerator):
    """Renders the FDI document describing a train's functions."""

    def __init__(self) -> None:
        super().__init__()
        self._steps: Iterator[tuple[str | int, ...]] = iter(())

    def reset(self, entry: TrainDbEntry) -> None:
        """Start a new document for ``entry``."""
        self._internal_reset()
        self._steps = self._render(entry)

    def generate_more(self) -> None:
        for piece in next(self._steps, ()):
            self._add_to_output(piece)

    @staticmethod
    def _render(entry: TrainDbEntry) -> Iterator[tuple[str | int, ...]]:
        yield (_FDI_HEAD,)
        fn = 0
        while True:
            while fn <= entry.max_fn and entry.function_label(fn) in _NOT_PRESENT:
                fn += 1
            if fn > entry.max_fn:
                break
            fn_type = entry.function_label(fn)
            yield (_MOMENTARY_FUNCTION if fn_type & 0x80 else _BINARY_FUNCTION,)
            label = label_for_function(fn_type)
            name: tuple[str | int, ...] = (label,) if label else ("F", fn)
            yield ("<name>", *name, "</name>\n")
            yield ("<number>", fn, "</number>\n</function>\n")
            fn += 1
        yield (_FDI_TAIL,)