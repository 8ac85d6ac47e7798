"""Shared constants and logger for the rtl_tcp client."""

import logging

log = logging.getLogger("rtltcp")

DEFAULT_ADDRESS  = "127.0.0.1:1234"   # rtl_tcp listens here unless told otherwise

DONGLE_MAGIC     = b"RTL0"

DONGLE_INFO_SIZE = 12                 # magic(4) + tuner(4) + gain count(4)

COMMAND_SIZE     = 5                  # opcode(1) + parameter(4)

U32_MAX          = 0xFFFFFFFF

TUNER_NAMES = {
    1: "E4000",
    2: "FC0012",
    3: "FC0013",
    4: "FC2580",
    5: "R820T",
    6: "R828D",
}


def _split_address(address: str) -> tuple[str, int]:
    """Split ``host:port`` into its parts. An empty address means the default."""
    if not address:
        address = DEFAULT_ADDRESS
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"address must be of the form <host>:<port>, got {address!r}")
    return host.strip("[]") or "127.0.0.1", int(port)
