import pytest

from trainsearch.find_protocol import (
    ADDRESS_ONLY,
    ALLOCATE,
    EXACT,
    IS_TRAIN_EVENT,
    MATCH_ANY,
    TRAIN_FIND_BASE,
    address_to_query,
    input_to_allocate,
    input_to_search,
    is_find_event,
    match_event_to_drive_mode,
    match_query_to_node,
    match_query_to_train,
    query_to_address,
)
from trainsearch.traindb import ExternalTrainDbEntry
from trainsearch.traindb_defs import DccMode

FULL = MATCH_ANY | ADDRESS_ONLY | EXACT


def test_input_to_search_pinned_value():
    assert input_to_search("415") == 0x090099FFFFF41500


def test_empty_inputs():
    assert input_to_search("") == IS_TRAIN_EVENT
    assert input_to_allocate("") == 0


@pytest.mark.parametrize("address", [1, 3, 42, 415, 9999, 474014])
def test_search_matches_address_to_query(address):
    assert input_to_search(str(address)) == address_to_query(
        address, False, DccMode.DCCMODE_DEFAULT
    )


@pytest.mark.parametrize("address", [1, 7, 128, 415, 10239])
def test_address_query_round_trip(address):
    event = address_to_query(address, True, DccMode.DCCMODE_DEFAULT)
    assert is_find_event(event)
    assert event & EXACT
    assert query_to_address(event) == (address, DccMode.DCCMODE_DEFAULT)


def test_is_find_event():
    assert is_find_event(TRAIN_FIND_BASE)
    assert is_find_event(input_to_allocate("12"))
    assert not is_find_event(IS_TRAIN_EVENT)


def test_prefix_zero_forces_long_address():
    address, mode = query_to_address(input_to_search("021"))
    assert address == 21
    assert mode == DccMode.DCC_ANY | DccMode.DCC_LONG_ADDRESS


def test_allocate_flags_and_default_mode():
    event = input_to_allocate("415")
    assert event & (ALLOCATE | EXACT | ADDRESS_ONLY) == ALLOCATE | EXACT | ADDRESS_ONLY
    assert query_to_address(event) == (415, DccMode.DCC_128)


@pytest.mark.parametrize(
    "text, mode",
    [
        ("415M", DccMode.MARKLIN_NEW),
        ("415m", DccMode.MARKLIN_OLD),
        ("415L", DccMode.DCC_128_LONG_ADDRESS),
        ("415S", DccMode.DCC_128),
    ],
)
def test_allocate_suffix_modes(text, mode):
    assert query_to_address(input_to_allocate(text)) == (415, mode)


def test_match_event_to_drive_mode():
    any_mode = input_to_search("3")
    marklin = input_to_search("3M")
    assert match_event_to_drive_mode(any_mode, DccMode.DCC_28)
    assert match_event_to_drive_mode(marklin, DccMode.DCCMODE_DEFAULT)
    assert match_event_to_drive_mode(marklin, DccMode.MARKLIN_OLD)
    assert not match_event_to_drive_mode(marklin, DccMode.DCC_28)


def test_empty_search_matches_everything():
    train = ExternalTrainDbEntry("anything", 77, DccMode.DCC_28)
    assert match_query_to_node(input_to_search(""), train) == FULL


def test_exact_address_match():
    assert match_query_to_train(input_to_search("415"), "x", 415, DccMode.DCC_28) == FULL


def test_address_prefix_match():
    result = match_query_to_train(input_to_search("41"), "x", 415, DccMode.DCC_28)
    assert result == MATCH_ANY | ADDRESS_ONLY


def test_allocate_exact_address_match():
    event = input_to_allocate("415")
    assert match_query_to_train(event, "x", 415, DccMode.DCC_28) == FULL
    assert match_query_to_train(input_to_allocate("41"), "x", 415, DccMode.DCC_28) == 0


def test_allocate_rejects_other_protocol():
    assert match_query_to_train(input_to_allocate("3"), "x", 3, DccMode.MARKLIN_NEW) == 0


def test_search_mode_restriction_rejects():
    assert match_query_to_train(input_to_search("3M"), "x", 3, DccMode.DCC_28) == 0


def test_name_exact_match_on_cab_number():
    result = match_query_to_train(
        input_to_search("11239"), "Re 4/4 11239", 3, DccMode.DCC_28
    )
    assert result == MATCH_ANY | EXACT


def test_name_prefix_match():
    result = match_query_to_train(input_to_search("4"), "Re 4/4 11239", 3, DccMode.DCC_28)
    assert result == MATCH_ANY


def test_name_without_digits_does_not_match():
    assert match_query_to_train(input_to_search("12"), "Steamer", 5, DccMode.DCC_28) == 0


def test_query_without_digits_matches_any():
    assert match_query_to_train(input_to_search("abc"), "Steamer", 3, DccMode.DCC_28) == MATCH_ANY