"""DCC packets as exchanged with the track signal generators, and their bit streams."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

#: Maximum number of payload bytes in one packet.
DCC_PACKET_MAX_PAYLOAD = 6

#: Half-bit time of a one bit, in generator cycles of 5 ns.
ONE_BIT_TIME = 11600
#: Half-bit time of a zero bit, in generator cycles of 5 ns.
ZERO_BIT_TIME = 20000

#: Preamble length (one bits) on the main track.
MAIN_PREAMBLE_LENGTH = 16
#: Preamble length (one bits) on the programming track.
PROG_PREAMBLE_LENGTH = 22

# Wire layout: two unused header bytes, the header byte, the payload length,
# six payload bytes, two bytes of padding and a 32-bit feedback key.
_LAYOUT = struct.Struct("<2xBB6s2xI")

#: Size in bytes of an encoded packet.
PACKET_SIZE = _LAYOUT.size


@dataclass(frozen=True)
class PacketHeader:
    """The command byte of a packet to send.

    Bit 0 is ``is_pkt`` (0 for packets), bit 1 marks a Marklin-Motorola
    packet, bit 2 suppresses the error-check byte, bit 3 requests a long
    preamble, bit 4 asks for service mode acknowledgement, bits 5-6 hold the
    repeat count and bit 7 is reserved.
    """

    is_marklin: bool = False
    skip_ec: bool = False
    send_long_preamble: bool = False
    sense_ack: bool = False
    rept_count: int = 0
    reserved: bool = False
    is_pkt: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.rept_count <= 3:
            raise ValueError(f"repeat count {self.rept_count} is outside 0..3")

    @property
    def raw(self) -> int:
        """The header as a single byte."""
        return (
            int(self.is_pkt)
            | int(self.is_marklin) << 1
            | int(self.skip_ec) << 2
            | int(self.send_long_preamble) << 3
            | int(self.sense_ack) << 4
            | self.rept_count << 5
            | int(self.reserved) << 7
        )

    @classmethod
    def from_raw(cls, value: int) -> PacketHeader:
        """Decode a header byte."""
        if not 0 <= value <= 0xFF:
            raise ValueError(f"header byte {value} is outside 0..255")
        return cls(
            is_marklin=bool(value & 0x02),
            skip_ec=bool(value & 0x04),
            send_long_preamble=bool(value & 0x08),
            sense_ack=bool(value & 0x10),
            rept_count=(value >> 5) & 0x03,
            reserved=bool(value & 0x80),
            is_pkt=bool(value & 0x01),
        )


@dataclass(frozen=True)
class DccPacket:
    """A DCC packet: header, up to six payload bytes and a feedback key."""

    payload: bytes
    header: PacketHeader = field(default_factory=PacketHeader)
    feedback_key: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "payload", bytes(self.payload))
        if len(self.payload) > DCC_PACKET_MAX_PAYLOAD:
            raise ValueError(
                f"payload of {len(self.payload)} bytes exceeds "
                f"{DCC_PACKET_MAX_PAYLOAD}"
            )
        if not 0 <= self.feedback_key <= 0xFFFFFFFF:
            raise ValueError(f"feedback key {self.feedback_key} does not fit 32 bits")

    @property
    def dlc(self) -> int:
        """Number of used payload bytes."""
        return len(self.payload)

    def to_bytes(self) -> bytes:
        """Encode the packet in its wire layout."""
        return _LAYOUT.pack(self.header.raw, self.dlc, self.payload, self.feedback_key)

    @classmethod
    def from_bytes(cls, data: bytes) -> DccPacket:
        """Decode a packet; bytes beyond the packet size are ignored."""
        if len(data) < PACKET_SIZE:
            raise ValueError(f"need {PACKET_SIZE} bytes, got {len(data)}")
        header, dlc, payload, key = _LAYOUT.unpack(bytes(data[:PACKET_SIZE]))
        if dlc > DCC_PACKET_MAX_PAYLOAD:
            raise ValueError(f"payload length {dlc} exceeds {DCC_PACKET_MAX_PAYLOAD}")
        return cls(payload[:dlc], PacketHeader.from_raw(header), key)


def idle_packet() -> DccPacket:
    """The DCC idle packet the generators send until told otherwise."""
    return DccPacket(b"\xff\x00\xff")


def packet_bits(packet: DccPacket, preamble_length: int = MAIN_PREAMBLE_LENGTH) -> list[int]:
    """The bits put on the track for one transmission of ``packet``.

    A preamble of one bits, then each payload byte (most significant bit
    first) preceded by a zero start bit, then a closing one bit.
    """
    if not packet.payload:
        raise ValueError("a packet needs at least one payload byte")
    if preamble_length < 0:
        raise ValueError("preamble length must not be negative")
    bits = [1] * preamble_length
    for byte in packet.payload:
        bits.append(0)
        bits.extend((byte >> i) & 1 for i in range(7, -1, -1))
    bits.append(1)
    return bits