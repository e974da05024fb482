"""Common definitions for the train database: drive modes and function symbols."""

from __future__ import annotations

import enum
import logging

_log = logging.getLogger(__name__)

#: Highest function number (exclusive) a DCC train entry can describe.
DCC_MAX_FN = 29


class Symbol(enum.IntEnum):
    """Display symbols assigned to train functions.

    Values with the ``MOMENTARY`` bit (128) set describe momentary functions.
    """

    FN_NONEXISTANT = 0
    LIGHT = 1
    BEAMER = 2
    BELL = 3
    HORN = 128 + 4
    SHUNT = 5
    PANTO = 6
    SMOKE = 7
    ABV = 8
    WHISTLE = 128 + 9
    SOUND = 10
    FNT11 = 11
    SPEECH = 128 + 12
    ENGINE = 13
    LIGHT1 = 14
    LIGHT2 = 15
    TELEX = 128 + 17
    FN_UNKNOWN = 127
    MOMENTARY = 128
    FNP = 139
    SOUNDP = 141
    # An erased EEPROM reads back as this value.
    FN_UNINITIALIZED = 255


class DccMode(enum.IntFlag):
    """Drive mode bit field of a legacy (DCC or Marklin-Motorola) train.

    Bits 0-1 select the speed-step / protocol variant, bit 2 forces a long
    address (DCC) or marks Marklin, bit 3 marks DCC.
    """

    DCCMODE_DEFAULT = 0
    DCCMODE_FAKE_DRIVE = 1
    DCCMODE_OLCBUSER = 1

    MARKLIN_ANY = 0b00100
    MARKLIN_ANY_MASK = 0b11100
    MARKLIN_DEFAULT = MARKLIN_ANY
    MARKLIN_OLD = MARKLIN_ANY | 1
    MARKLIN_NEW = MARKLIN_ANY | 2
    MARKLIN_TWOADDR = MARKLIN_ANY | 3
    MFX = MARKLIN_NEW

    DCC_ANY = 0b01000
    DCC_ANY_MASK = 0b11000
    DCC_DEFAULT = DCC_ANY
    DCC_LONG_ADDRESS = 0b00100
    DCC_SS_MASK = 0b00011
    DCC_DEFAULT_SS = DCC_DEFAULT
    DCC_14 = DCC_ANY | 1
    DCC_28 = DCC_ANY | 2
    DCC_128 = DCC_ANY | 3
    DCC_14_LONG_ADDRESS = DCC_14 | DCC_LONG_ADDRESS
    DCC_28_LONG_ADDRESS = DCC_28 | DCC_LONG_ADDRESS
    DCC_128_LONG_ADDRESS = DCC_128 | DCC_LONG_ADDRESS

    DCCMODE_PROTOCOL_MASK = 0b11111


class TrainAddressType(enum.Enum):
    """Kind of address that, together with the number, names a train on the track."""

    DCC_SHORT_ADDRESS = enum.auto()
    DCC_LONG_ADDRESS = enum.auto()
    MM = enum.auto()
    UNSPECIFIED = enum.auto()
    UNSUPPORTED = enum.auto()


def dcc_mode_to_address_type(mode: int, address: int) -> TrainAddressType:
    """Return the address type a drive mode and legacy address describe.

    ``UNSPECIFIED`` is returned for the default mode and ``UNSUPPORTED`` for a
    mode whose protocol bits are not recognised.
    """
    mode = DccMode(mode)
    if mode == DccMode.DCCMODE_DEFAULT:
        return TrainAddressType.UNSPECIFIED
    if mode & DccMode.MARKLIN_ANY_MASK == DccMode.MARKLIN_ANY:
        return TrainAddressType.MM
    if mode & DccMode.DCC_ANY_MASK == DccMode.DCC_ANY:
        if mode & DccMode.DCC_LONG_ADDRESS or address >= 128:
            return TrainAddressType.DCC_LONG_ADDRESS
        return TrainAddressType.DCC_SHORT_ADDRESS
    _log.error("Unsupported drive mode %d (0x%02x)", int(mode), int(mode))
    return TrainAddressType.UNSUPPORTED


def dcc_mode_to_protocol(mode: int) -> DccMode:
    """Strip a drive mode down to its protocol: default, OpenLCB, Marklin or DCC.

    Unknown modes are logged and returned unchanged.
    """
    mode = DccMode(mode)
    if mode in (DccMode.DCCMODE_DEFAULT, DccMode.DCCMODE_OLCBUSER):
        return mode
    if mode & DccMode.MARKLIN_ANY_MASK == DccMode.MARKLIN_ANY:
        return DccMode.MARKLIN_ANY
    if mode & DccMode.DCC_ANY_MASK == DccMode.DCC_ANY:
        return DccMode.DCC_ANY
    _log.error("Unknown DCC Mode %d", int(mode))
    return mode