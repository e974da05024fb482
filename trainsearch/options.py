"""Command line options of the command station node."""

from __future__ import annotations

import getopt
import re
import sys
from dataclasses import dataclass, field, fields

#: Node ID used when none is given on the command line.
DEFAULT_NODE_ID = 0x050101012200
#: Default host of an upstream hub.
DEFAULT_UPSTREAM_HOST = "localhost"
#: Default port of an upstream GridConnect hub.
DEFAULT_UPSTREAM_PORT = 12021
#: Default name of the CAN socket.
DEFAULT_CAN_SOCKET = "can1"
#: Default port the GridConnect hub server listens on.
DEFAULT_HUB_PORT = 12021
#: Port a WiThrottle server uses when ``-W`` names no port.
WITHROTTLE_DEFAULT_PORT = 12090

_OPTSTRING = "hn:e:t:M:P:u:q:c:p:W:"
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class UsageError(ValueError):
    """The command line could not be used."""


class HelpRequested(UsageError):
    """The user asked for the usage text."""


def _eeprom_path(node_id: int) -> str:
    return f"/tmp/config_eeprom_{node_id:012X}"


def _train_file_path(node_id: int) -> str:
    return f"/tmp/persistent_train_file_{node_id:012X}"


@dataclass
class Options:
    """Settings of one command station run."""

    node_id: int = DEFAULT_NODE_ID
    eeprom_path: str = field(default_factory=lambda: _eeprom_path(DEFAULT_NODE_ID))
    train_file: str = field(default_factory=lambda: _train_file_path(DEFAULT_NODE_ID))
    main_firmware: str = "MainTrackDCC.out"
    prog_firmware: str = "ProgTrackDCC.out"
    upstream_host: str = DEFAULT_UPSTREAM_HOST
    upstream_port: int = DEFAULT_UPSTREAM_PORT
    can_socket: str = DEFAULT_CAN_SOCKET
    hub_port: int = DEFAULT_HUB_PORT
    start_withrottle: bool = False
    withrottle_name: str = "PocketBeagle"
    withrottle_port: int = -1


def parse_node_id(text: str) -> int:
    """Parse a node ID of 12 hex digits, optionally with 5 colons between pairs.

    Raises ``ValueError`` for anything else.
    """
    result = 0
    digits = colons = 0
    for ch in text:
        if ch in "0123456789abcdefABCDEF":
            result = (result << 4) | int(ch, 16)
            digits += 1
        elif ch == ":":
            colons += 1
        else:
            raise ValueError(f"Syntax error: Illformed node id: {text}")
    if digits != 12 or colons not in (0, 5):
        raise ValueError(f"Syntax error: Illformed node id: {text}")
    return result


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def parse_args(argv: list[str]) -> Options:
    """Parse command line arguments (without the program name).

    The default EEPROM and train file paths derive from the default node ID,
    whatever ``-n`` says. Raises ``HelpRequested`` for ``-h`` and
    ``UsageError`` for unknown options or a malformed node ID.
    """
    try:
        opts, _ = getopt.getopt(argv, _OPTSTRING)
    except getopt.GetoptError as exc:
        raise UsageError(f"Unknown option {exc.opt}") from exc

    options = Options()
    for opt, value in opts:
        if opt == "-h":
            raise HelpRequested("help requested")
        if opt == "-n":
            try:
                options.node_id = parse_node_id(value)
            except ValueError as exc:
                raise UsageError(str(exc)) from exc
        elif opt == "-e":
            options.eeprom_path = value
        elif opt == "-t":
            options.train_file = value
        elif opt == "-M":
            options.main_firmware = value
        elif opt == "-P":
            options.prog_firmware = value
        elif opt == "-u":
            options.upstream_host = value
        elif opt == "-q":
            options.upstream_port = _atoi(value)
        elif opt == "-c":
            options.can_socket = value
        elif opt == "-p":
            options.hub_port = _atoi(value)
        elif opt == "-W":
            options.start_withrottle = True
            name, sep, port = value.partition(":")
            options.withrottle_port = _atoi(port) if sep else WITHROTTLE_DEFAULT_PORT
            options.withrottle_name = name
    return options


def usage(program: str) -> str:
    """The usage text."""
    return (
        f"Usage: {program} [-e EEPROM_file_path] [-t Persistent_Train_file_path]\n\n"
        "OpenMRN-Cxx-Node.\nManages a Beagle Bone Command Station Cape.\n"
        "\nOptions:\n"
        " [-n nodeid] [-M mainPRUfirmware] [-P progPRUfirmware]"
        " [-u upstream_host] [-q upstream_port] [-c can_socketname]"
        " [-p hub_port] [-W name:port]\n"
        "\t-n nodeid is the node id, as a 12 hex digit number (optionally with "
        "colons between pairs of hex digits.\n"
        "\t-e EEPROM_file_path is the path to use to implement the EEProm device.\n"
        "\t-t Persistent_Train_file_path is the path to use to the implement the "
        "train persistent data.\n"
        "\t-M mainPRUfirmware is the path to the mains PRU (PRU0) firmware\n"
        "\t-P progPRUfirmware is the path to the prog PRU (PRU1) firmware\n"
        "\t-u upstream_host   is the host name for an upstream hub.\n"
        "\t-q upstream_port   is the port number for the upstream hub.\n"
        "\t-c can_socketname   is the name of the CAN socket.\n"
        "\t-p hub_port   is the port the GridConnect hub listens on.\n"
        "\t-W name:port Start a WiThrottle named name on port (if :port\n"
        "\t             is ommited, on the default port).\n"
    )


def main(argv: list[str] | None = None) -> int:
    """Parse the command line and print the resulting settings."""
    args = sys.argv[1:] if argv is None else argv
    program = sys.argv[0] if sys.argv and sys.argv[0] else "commandstation"
    try:
        options = parse_args(args)
    except HelpRequested:
        print(usage(program), file=sys.stderr)
        return 1
    except UsageError as exc:
        print(exc, file=sys.stderr)
        print(usage(program), file=sys.stderr)
        return 1
    for item in fields(options):
        value = getattr(options, item.name)
        if item.name == "node_id":
            value = f"{value:012X}"
        print(f"{item.name}: {value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())