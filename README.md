# trainsearch

Building blocks for an LCC/OpenLCB-aware DCC command station:

- **Train search protocol** (`trainsearch.find_protocol`). It turns what a
  user types on a throttle into find-protocol events. It also matches queries
  against locomotives by address, drive mode and the numbers in the train name.
- **Train database model** (`trainsearch.traindb`). Abstract `TrainDb` and
  `TrainDbEntry` classes, plus `ExternalTrainDbEntry` for a train described
  only by name, address, drive mode and description.
- **Drive modes and function symbols** (`trainsearch.traindb_defs`).
  `DccMode`, `Symbol`, `TrainAddressType`, `dcc_mode_to_address_type` and
  `dcc_mode_to_protocol`.
- **FDI XML generation** (`trainsearch.xml_generator`, `trainsearch.fdi_xml`).
  `FdiXmlGenerator` produces the function description XML for a train in
  pieces. You read it with forward-moving `read(offset, length)` calls.
- **DCC packets** (`trainsearch.dcc_packet`). `DccPacket` and `PacketHeader`
  give the packet layout exchanged with the track signal generators. The module
  also has `idle_packet()` and `packet_bits()`, which returns the bits sent on
  the rails.
- **Command station options** (`trainsearch.options`). `parse_node_id`,
  `parse_args`, the `Options` dataclass and the `trainsearch-cs` command.

## Installation

```
pip install .
```

To run the tests, install with the test extra and run pytest:

```
pip install .[test]
pytest
```

## Searching for trains

```python
from trainsearch.find_protocol import (
    input_to_search,
    input_to_allocate,
    match_query_to_train,
    query_to_address,
    is_find_event,
    MATCH_ANY,
    EXACT,
)
from trainsearch.traindb_defs import DccMode

event = input_to_search("11239")
assert is_find_event(event)

# 0 means no match; otherwise MATCH_ANY is set, plus ADDRESS_ONLY and/or EXACT.
result = match_query_to_train(event, "Re 4/4 11239", 11239, DccMode.DCC_28)

# An allocate request carries the address and the desired drive mode.
request = input_to_allocate("0415")
address, mode = query_to_address(request)
```

The typed text follows these rules:

- A leading `0` or a trailing `L` forces a DCC long address.
- A trailing `M` selects Marklin-Motorola (new).
- A trailing `m` selects Marklin-Motorola (old).
- A trailing `S` selects DCC.
- An empty search gives `IS_TRAIN_EVENT`, which matches every train.
- An empty allocate request gives 0.

`address_to_query(address, exact, mode)` builds a query from a number entered
on a simple throttle. `match_query_to_node(event, entry)` works on any
`TrainDbEntry`.

## Describing trains

```python
from trainsearch.traindb import ExternalTrainDbEntry
from trainsearch.fdi_xml import FdiXmlGenerator, label_for_function
from trainsearch.traindb_defs import DccMode, Symbol

entry = ExternalTrainDbEntry("BR 218 218123", 3, DccMode.DCC_128)

generator = FdiXmlGenerator()
generator.reset(entry)
chunk = generator.read(0, 64)

assert label_for_function(Symbol.HORN) == "Horn"
```

Data that has been read entirely is dropped. A read at an offset before
`file_offset` raises `ValueError`; call `reset` to start again. A short read
marks the end of the document.

## DCC packets

```python
from trainsearch.dcc_packet import DccPacket, idle_packet, packet_bits

packet = idle_packet()
raw = packet.to_bytes()
assert DccPacket.from_bytes(raw) == packet

bits = packet_bits(packet, 16)
```

`MAIN_PREAMBLE_LENGTH` (16) and `PROG_PREAMBLE_LENGTH` (22) are the preamble
lengths for the main and programming tracks.

## The `trainsearch-cs` command

`trainsearch-cs` parses the command station options and prints the resulting
settings, one per line.

| Option | Meaning |
| --- | --- |
| `-n nodeid` | node ID, 12 hex digits, optionally with colons between the pairs |
| `-e path` | configuration (EEPROM) file path |
| `-t path` | persistent train file path |
| `-M file` | main track firmware |
| `-P file` | programming track firmware |
| `-u host` | upstream hub host |
| `-q port` | upstream hub port |
| `-c name` | CAN socket name |
| `-p port` | GridConnect hub server port |
| `-W name[:port]` | WiThrottle name and port (12090 when no port is given) |
| `-h` | print the usage text |

```
trainsearch-cs -n 05:01:01:01:22:00 -W Layout:12090
```

With `-h`, an unknown option or a malformed node ID, the command prints the
usage text to standard error and exits with status 1.

## What this package does not do

The package holds no network stack. It does not connect to an LCC/OpenLCB bus,
a CAN socket or a hub. It does not answer find-protocol or identify requests on
behalf of train nodes. It does not drive track signal generators or manage the
processors that run them. `trainsearch-cs` only works out and prints the
settings such a node would use.