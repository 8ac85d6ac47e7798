"""Fixed-layout big-endian records of the rtl_tcp protocol."""

import struct
from enum import IntEnum

from .common import COMMAND_SIZE, DONGLE_INFO_SIZE, U32_MAX
from .errors import ArgumentValidationError, ProtocolValidationError, TransportError
from .models import Command, DongleInfo, Tuner

_COMMAND    = struct.Struct(">BI")
_DONGLE_INFO = struct.Struct(">4sII")


class Opcode(IntEnum):
    """Command numbers as defined in rtl_tcp.c. Values are the wire contract."""
    CENTER_FREQ     = 1
    SAMPLE_RATE     = 2
    TUNER_GAIN_MODE = 3
    TUNER_GAIN      = 4
    FREQ_CORRECTION = 5
    TUNER_IF_GAIN   = 6
    TEST_MODE       = 7
    AGC_MODE        = 8
    DIRECT_SAMPLING = 9
    OFFSET_TUNING   = 10
    RTL_XTAL_FREQ   = 11
    TUNER_XTAL_FREQ = 12
    GAIN_BY_INDEX   = 13


def encode_command(opcode: int, parameter: int) -> bytes:
    """Return the 5-byte wire form: opcode, then parameter MSB first."""
    if not 0 <= int(opcode) <= 0xFF:
        raise ArgumentValidationError(f"opcode out of range: {opcode}", value=opcode)
    if not 0 <= int(parameter) <= U32_MAX:
        raise ArgumentValidationError(
            f"parameter for opcode {int(opcode)} out of range: {parameter}", value=parameter
        )
    return _COMMAND.pack(int(opcode), int(parameter))


def decode_command(data: bytes) -> Command:
    if len(data) != COMMAND_SIZE:
        raise ProtocolValidationError(
            f"command record must be {COMMAND_SIZE} bytes, got {len(data)}"
        )
    opcode, parameter = _COMMAND.unpack(data)
    return Command(opcode=opcode, parameter=parameter)


def decode_dongle_info(data: bytes) -> DongleInfo:
    """Unpack the 12-byte identity record. The magic is not checked here."""
    if len(data) != DONGLE_INFO_SIZE:
        raise ProtocolValidationError(
            f"dongle info must be {DONGLE_INFO_SIZE} bytes, got {len(data)}",
            received=bytes(data),
        )
    magic, tuner, gain_count = _DONGLE_INFO.unpack(data)
    return DongleInfo(magic=magic, tuner=Tuner(tuner), gain_count=gain_count)


def recv_exact(conn, size: int) -> bytes:
    """Read exactly ``size`` bytes from a socket-like ``conn``.

    Raises TransportError if the peer closes first or the read fails.
    """
    buf = bytearray()
    while len(buf) < size:
        try:
            chunk = conn.recv(size - len(buf))
        except OSError as e:
            raise TransportError(f"read failed after {len(buf)} of {size} bytes: {e}") from e
        if not chunk:
            raise TransportError(f"connection closed after {len(buf)} of {size} bytes")
        buf += chunk
    return bytes(buf)
