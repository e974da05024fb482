"""Train find protocol: encoding of search queries as event IDs and matching them to trains."""

from __future__ import annotations

import logging

from trainsearch.traindb import ExternalTrainDbEntry, TrainDbEntry
from trainsearch.traindb_defs import (
    DccMode,
    TrainAddressType,
    dcc_mode_to_address_type,
    dcc_mode_to_protocol,
)

_log = logging.getLogger(__name__)

#: Base of the event range used by the find protocol.
TRAIN_FIND_BASE = 0x090099FF00000000
#: Number of low bits of the event that carry the query.
TRAIN_FIND_MASK = 32
#: Bit where the query nibbles start (below it is the command byte).
TRAIN_FIND_MASK_LOW = 8

# Command byte flags.
ALLOCATE = 0x80
EXACT = 0x40
ADDRESS_ONLY = 0x20
#: Set in match results only, never on the wire.
MATCH_ANY = 0x01

# Query nibble values that are not digits.
NIBBLE_UNUSED = 0xF
NIBBLE_SPACE = 0xE
NIBBLE_STAR = 0xD
NIBBLE_QN = 0xC
NIBBLE_HASH = 0xB

#: Well-known event produced by every train node; the empty search.
IS_TRAIN_EVENT = 0x0101000000000303

#: Drive mode allocated when the query leaves it unspecified.
DEFAULT_DRIVE_MODE = DccMode.DCC_128
#: Drive mode allocated when the query asks for any Marklin mode.
DEFAULT_MARKLIN_DRIVE_MODE = DccMode.MARKLIN_NEW
#: Drive mode allocated when the query asks for any DCC mode.
DEFAULT_DCC_DRIVE_MODE = DccMode.DCC_128

_PROTOCOL_MASK = int(DccMode.DCCMODE_PROTOCOL_MASK)


def _is_number(ch: str) -> bool:
    return "0" <= ch <= "9"


def _query_nibbles(event: int):
    """Yield the query nibbles of an event, most significant first."""
    for shift in range(TRAIN_FIND_MASK - 4, TRAIN_FIND_MASK_LOW - 1, -4):
        yield (event >> shift) & 0xF


def _has_query(event: int) -> bool:
    return any(nibble <= 9 for nibble in _query_nibbles(event))


def _attempt_match(name: str, pos: int, event: int) -> int:
    """Match the query digits against the digits of ``name`` starting at ``pos``."""
    count_matches = 0
    for nibble in _query_nibbles(event):
        if nibble > 9:
            continue
        while pos < len(name) and not _is_number(name[pos]):
            pos += 1
        if pos >= len(name) or int(name[pos]) != nibble:
            return 0
        pos += 1
        count_matches += 1
    if count_matches == 0:
        return 0
    while pos < len(name) and not _is_number(name[pos]):
        pos += 1
    if pos < len(name):
        if event & EXACT:
            return 0
        return MATCH_ANY
    return EXACT | MATCH_ANY


def is_find_event(event: int) -> bool:
    """Whether ``event`` lies in the find protocol's event range."""
    return (event >> TRAIN_FIND_MASK) == (TRAIN_FIND_BASE >> TRAIN_FIND_MASK)


def match_event_to_drive_mode(event: int, mode: int) -> bool:
    """Whether a locomotive's drive mode satisfies the query's mode restriction."""
    req_mode = event & _PROTOCOL_MASK
    if req_mode == DccMode.DCCMODE_DEFAULT:
        return True
    if mode == DccMode.DCCMODE_DEFAULT:
        return True
    return dcc_mode_to_protocol(mode) == dcc_mode_to_protocol(req_mode)


def query_to_address(event: int) -> tuple[int, DccMode]:
    """Decode a query into ``(address, mode)``.

    All digits are glued into one number. A leading zero forces a DCC long
    address; allocation requests get default drive modes filled in.
    """
    supplied_address = 0
    has_prefix_zero = False
    for nibble in _query_nibbles(event):
        if nibble == 0 and supplied_address == 0:
            has_prefix_zero = True
        if nibble <= 9:
            supplied_address = supplied_address * 10 + nibble

    drive_type = event & _PROTOCOL_MASK
    if event & ALLOCATE:
        if drive_type == DccMode.DCCMODE_DEFAULT:
            drive_type = int(DEFAULT_DRIVE_MODE)
        elif drive_type == DccMode.MARKLIN_DEFAULT:
            drive_type = int(DEFAULT_MARKLIN_DRIVE_MODE)
        elif drive_type == DccMode.DCC_DEFAULT:
            drive_type = int(DEFAULT_DCC_DRIVE_MODE)
        elif drive_type == DccMode.DCC_DEFAULT | DccMode.DCC_LONG_ADDRESS:
            drive_type |= int(DEFAULT_DCC_DRIVE_MODE) & int(DccMode.DCC_SS_MASK)

    if has_prefix_zero and (
        (drive_type & DccMode.DCC_ANY_MASK) == DccMode.DCC_ANY
        or drive_type == DccMode.DCCMODE_DEFAULT
    ):
        drive_type |= int(DccMode.DCC_DEFAULT | DccMode.DCC_LONG_ADDRESS)
    return supplied_address, DccMode(drive_type & 0xFF)


def address_to_query(address: int, exact: bool, mode: int) -> int:
    """Encode an address typed on a throttle as a find protocol query."""
    event = TRAIN_FIND_BASE
    shift = TRAIN_FIND_MASK_LOW
    while address:
        event |= (address % 10) << shift
        shift += 4
        address //= 10
    while shift < TRAIN_FIND_MASK:
        event |= 0xF << shift
        shift += 4
    if exact:
        event |= EXACT
    event |= int(mode) & _PROTOCOL_MASK
    return event


def match_query_to_node(event: int, train: TrainDbEntry) -> int:
    """Compare a query with a train.

    Returns 0 for no match, otherwise a bit field of ``MATCH_ANY`` (always
    set), ``ADDRESS_ONLY`` (matched on the address) and ``EXACT`` (not a
    prefix match).
    """
    if event == IS_TRAIN_EVENT:
        return MATCH_ANY | ADDRESS_ONLY | EXACT
    legacy_address = train.legacy_address
    supplied_address, mode = query_to_address(event)
    req_has_query = _has_query(event)
    has_address_prefix_match = False
    actual_drive_mode = train.legacy_drive_mode
    desired_address_type = dcc_mode_to_address_type(mode, supplied_address)
    actual_address_type = dcc_mode_to_address_type(actual_drive_mode, legacy_address)
    if not match_event_to_drive_mode(event, actual_drive_mode):
        return 0
    if supplied_address == legacy_address:
        if (
            actual_address_type == TrainAddressType.UNSUPPORTED
            or desired_address_type == TrainAddressType.UNSPECIFIED
            or desired_address_type == actual_address_type
        ):
            return MATCH_ANY | ADDRESS_ONLY | EXACT
        _log.info(
            "exact match failed due to mode: desired %s actual %s",
            desired_address_type.name,
            actual_address_type.name,
        )
        has_address_prefix_match = (event & EXACT) == 0
    if (event & EXACT) == 0:
        address_prefix = legacy_address // 10
        while address_prefix:
            if address_prefix == supplied_address:
                has_address_prefix_match = True
                break
            address_prefix //= 10
    if (
        mode != DccMode.DCCMODE_DEFAULT
        and event & EXACT
        and event & ALLOCATE
        and event & ADDRESS_ONLY
    ):
        if desired_address_type != actual_address_type:
            return 0
    if event & ADDRESS_ONLY:
        if (event & EXACT) or not has_address_prefix_match:
            return 0
        return MATCH_ANY | ADDRESS_ONLY
    if not req_has_query:
        if event & EXACT:
            return 0
        return MATCH_ANY

    first_name_match: int | None = None
    best_name_match = 0
    name = train.train_name
    pos = 0
    while pos < len(name):
        if _is_number(name[pos]):
            current_match = _attempt_match(name, pos, event)
            if first_name_match is None:
                first_name_match = current_match
                best_name_match = current_match
            # An exact match anywhere in the name wins, e.g. a cab number
            # following a model number.
            if (not best_name_match and current_match) or (current_match & EXACT):
                best_name_match = current_match
            while pos < len(name) and _is_number(name[pos]):
                pos += 1
        else:
            pos += 1
    if first_name_match is None:
        best_name_match = 0
    if (
        (best_name_match & EXACT) == 0
        and has_address_prefix_match
        and (event & EXACT) == 0
    ):
        return MATCH_ANY | ADDRESS_ONLY
    if (event & EXACT) and not (best_name_match & EXACT):
        return 0
    return best_name_match


def match_query_to_train(event: int, name: str, address: int, mode: int) -> int:
    """Compare a query with a train described by name, address and mode only."""
    return match_query_to_node(event, ExternalTrainDbEntry(name, address, DccMode(mode)))


def _input_to_event(text: str) -> int:
    event = TRAIN_FIND_BASE
    shift = TRAIN_FIND_MASK - 4
    has_space = True
    qry = 0xFFFFFFFF
    for ch in text:
        if shift < TRAIN_FIND_MASK_LOW:
            break
        if _is_number(ch):
            qry = ((qry << 4) | int(ch)) & 0xFFFFFFFF
            has_space = False
            shift -= 4
        else:
            if not has_space:
                qry = ((qry << 4) | 0xF) & 0xFFFFFFFF
                shift -= 4
            has_space = True
    event |= (qry & 0xFFFFFF) << TRAIN_FIND_MASK_LOW

    flags = 0
    last = text[-1]
    if text[0] == "0" or last == "L":
        flags |= int(DccMode.DCC_ANY | DccMode.DCC_LONG_ADDRESS)
    elif last == "M":
        flags |= int(DccMode.MARKLIN_NEW)
    elif last == "m":
        flags |= int(DccMode.MARKLIN_OLD)
    elif last == "S":
        flags |= int(DccMode.DCC_ANY)
    event &= ~0xFF
    event |= flags & 0xFF
    return event


def input_to_search(text: str) -> int:
    """Encode throttle input such as ``'415'`` or ``'021'`` as a search query.

    Empty input searches for every train.
    """
    if not text:
        return IS_TRAIN_EVENT
    return _input_to_event(text)


def input_to_allocate(text: str) -> int:
    """Encode throttle input as an allocation request; 0 for empty input.

    A leading zero or trailing ``L`` forces a DCC long address, a trailing
    ``M`` or ``m`` a Marklin locomotive and a trailing ``S`` DCC.
    """
    if not text:
        return 0
    return _input_to_event(text) | ALLOCATE | EXACT | ADDRESS_ONLY