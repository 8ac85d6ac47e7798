"""rtl_tcp client package.

Talks to the TCP server of an RTL2832U dongle: reads the dongle info
handshake, sends configuration commands and reads the IQ sample stream.
"""

from .common import DEFAULT_ADDRESS, DONGLE_MAGIC, DONGLE_INFO_SIZE, COMMAND_SIZE, TUNER_NAMES
from .errors import (
    RtlTcpError,
    TransportError,
    ProtocolValidationError,
    ArgumentValidationError,
    ConfigurationMappingError,
    ConfigurationError,
)
from .models import Tuner, DongleInfo, Command, Config, default_config
from .codec import Opcode, encode_command, decode_command, decode_dongle_info, recv_exact
from .samples import SampleReader, iq_from_bytes
from .tcp_client import SDR, CONFIG_DISPATCH, perform_handshake

__all__ = [
    "DEFAULT_ADDRESS",
    "DONGLE_MAGIC",
    "DONGLE_INFO_SIZE",
    "COMMAND_SIZE",
    "TUNER_NAMES",
    "RtlTcpError",
    "TransportError",
    "ProtocolValidationError",
    "ArgumentValidationError",
    "ConfigurationMappingError",
    "ConfigurationError",
    "Tuner",
    "DongleInfo",
    "Command",
    "Config",
    "default_config",
    "Opcode",
    "encode_command",
    "decode_command",
    "decode_dongle_info",
    "recv_exact",
    "SampleReader",
    "iq_from_bytes",
    "SDR",
    "CONFIG_DISPATCH",
    "perform_handshake",
]
