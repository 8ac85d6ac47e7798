"""rtl_tcp command/control connection."""

import dataclasses
import socket
import threading
from typing import Callable, Optional

from .codec import Opcode, decode_dongle_info, encode_command, recv_exact
from .common import DONGLE_INFO_SIZE, DONGLE_MAGIC, U32_MAX, _split_address, log
from .errors import (
    ArgumentValidationError,
    ConfigurationError,
    ConfigurationMappingError,
    ProtocolValidationError,
    RtlTcpError,
    TransportError,
)
from .models import Config, DongleInfo, default_config
from .samples import SampleReader


def perform_handshake(conn) -> DongleInfo:
    """Read and validate the dongle info record sent right after connect."""
    try:
        data = recv_exact(conn, DONGLE_INFO_SIZE)
    except TransportError as e:
        raise TransportError(f"Error getting dongle information: {e}") from e

    info = decode_dongle_info(data)
    if not info.is_valid():
        raise ProtocolValidationError(
            f"Invalid magic number: expected {DONGLE_MAGIC!r} received {info.magic!r}",
            expected=DONGLE_MAGIC,
            received=info.magic,
        )
    return info


class SDR:
    """
    Handle for one rtl_tcp server connection.
    Holds the dongle info from the handshake and the configuration to apply,
    sends commands, and hands out a SampleReader for the IQ stream.
    """

    def __init__(self, conn=None, config: Optional[Config] = None,
                 info: Optional[DongleInfo] = None):
        self.conn   = conn
        self.config = config if config is not None else default_config()
        self.info   = info
        self._write_lock = threading.Lock()

    @classmethod
    def open(cls, address: str = "", timeout: Optional[float] = None,
             config: Optional[Config] = None) -> "SDR":
        sdr = cls(config=config)
        sdr.connect(address, timeout)
        return sdr

    def connect(self, address: str = "", timeout: Optional[float] = None):
        """
        Connect to the server at ``<host>:<port>`` and read the dongle info.
        An empty address means 127.0.0.1:1234. ``timeout`` only bounds the dial.
        The caller is responsible for close().
        """
        host, port = _split_address(address)
        self.close()
        log.info(f"Connecting to {host}:{port}")
        try:
            self.conn = socket.create_connection((host, port), timeout=timeout)
            self.conn.settimeout(None)
        except OSError as e:
            self.conn = None
            raise TransportError(f"Error connecting to spectrum server: {e}") from e

        try:
            self.info = perform_handshake(self.conn)
        except RtlTcpError:
            self.close()
            raise
        log.info(f"Dongle info: {self.info}")

    def close(self):
        if self.conn is not None:
            self.conn.close()
            self.conn = None
            log.info("Connection closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def sample_reader(self) -> SampleReader:
        """Return a reader for the sample stream that follows the handshake."""
        if self.conn is None:
            raise TransportError("not connected")
        return SampleReader(self.conn)

    # ── Commands ────────────────────────────────────────────────────────────

    def execute(self, opcode: Opcode, parameter: int):
        """Encode one command and write it with a single sendall."""
        try:
            opcode = Opcode(opcode)
        except ValueError as e:
            raise ArgumentValidationError(f"unknown opcode: {opcode}", value=opcode) from e
        if self.conn is None:
            raise TransportError(f"{opcode.name}: not connected")
        packet = encode_command(opcode, parameter)
        try:
            with self._write_lock:
                self.conn.sendall(packet)
        except OSError as e:
            raise TransportError(f"{opcode.name}: write failed: {e}") from e
        log.debug(f"TX: {opcode.name} param={parameter}")

    def set_center_freq(self, freq: int):
        """Set the center frequency in Hz."""
        self.execute(Opcode.CENTER_FREQ, freq)

    def set_sample_rate(self, rate: int):
        """Set the sample rate in Hz."""
        self.execute(Opcode.SAMPLE_RATE, rate)

    def set_gain_mode(self, state: bool):
        # rtl_tcp treats 0 as manual gain, hence the inversion.
        self.execute(Opcode.TUNER_GAIN_MODE, 0 if state else 1)

    def set_gain(self, gain: int):
        """Set gain in tenths of dB (197 => 19.7 dB)."""
        self.execute(Opcode.TUNER_GAIN, gain)

    def set_freq_correction(self, ppm: int):
        """Set frequency correction in PPM. Negative values go out as two's complement."""
        self.execute(Opcode.FREQ_CORRECTION, ppm & U32_MAX)

    def set_tuner_if_gain(self, stage: int, gain: int):
        """Set gain of one tuner IF stage, gain in tenths of dB."""
        self.execute(Opcode.TUNER_IF_GAIN, ((stage & 0xFFFF) << 16) | (gain & 0xFFFF))

    def set_test_mode(self, state: bool):
        self.execute(Opcode.TEST_MODE, 1 if state else 0)

    def set_agc_mode(self, state: bool):
        """Set RTL AGC mode, True to enable."""
        self.execute(Opcode.AGC_MODE, 1 if state else 0)

    def set_direct_sampling(self, state: bool):
        self.execute(Opcode.DIRECT_SAMPLING, 1 if state else 0)

    def set_offset_tuning(self, state: bool):
        self.execute(Opcode.OFFSET_TUNING, 1 if state else 0)

    def set_rtl_xtal_freq(self, freq: int):
        self.execute(Opcode.RTL_XTAL_FREQ, freq)

    def set_tuner_xtal_freq(self, freq: int):
        self.execute(Opcode.TUNER_XTAL_FREQ, freq)

    def set_gain_by_index(self, idx: int):
        """Set gain by index into the dongle's gain table, must be <= info.gain_count."""
        gain_count = self.info.gain_count if self.info is not None else 0
        if idx > gain_count:
            raise ArgumentValidationError(
                f"invalid gain index: {idx} (gain count {gain_count})", value=idx
            )
        self.execute(Opcode.GAIN_BY_INDEX, idx)

    # ── Configuration ───────────────────────────────────────────────────────

    def configure(self, config: Optional[Config] = None):
        """
        Send every field of ``config`` (default: self.config) in declaration order.
        Stops at the first failure and raises ConfigurationError naming the field.
        """
        if config is None:
            config = self.config
        _check_config_dispatch(CONFIG_DISPATCH)

        for name, apply in CONFIG_DISPATCH:
            try:
                apply(self, getattr(config, name))
            except RtlTcpError as e:
                raise ConfigurationError(name, e) from e
        log.info("Configuration applied")


# Field name -> how to send it. Order matches Config; tuner IF gain is not a Config field.
CONFIG_DISPATCH: tuple[tuple[str, Callable[[SDR, object], None]], ...] = (
    ("center_freq",     lambda sdr, v: sdr.set_center_freq(int(v))),
    ("sample_rate",     lambda sdr, v: sdr.set_sample_rate(int(v))),
    ("tuner_gain_mode", lambda sdr, v: sdr.set_gain_mode(bool(v))),
    ("tuner_gain",      lambda sdr, v: sdr.set_gain(int(v * 10.0))),
    ("freq_correction", lambda sdr, v: sdr.set_freq_correction(int(v))),
    ("test_mode",       lambda sdr, v: sdr.set_test_mode(bool(v))),
    ("agc_mode",        lambda sdr, v: sdr.set_agc_mode(bool(v))),
    ("direct_sampling", lambda sdr, v: sdr.set_direct_sampling(bool(v))),
    ("offset_tuning",   lambda sdr, v: sdr.set_offset_tuning(bool(v))),
    ("rtl_xtal_freq",   lambda sdr, v: sdr.set_rtl_xtal_freq(int(v))),
    ("tuner_xtal_freq", lambda sdr, v: sdr.set_tuner_xtal_freq(int(v))),
    ("gain_by_index",   lambda sdr, v: sdr.set_gain_by_index(int(v))),
)


def _check_config_dispatch(table) -> None:
    """Raise ConfigurationMappingError unless ``table`` covers Config field-for-field, in order."""
    declared = [f.name for f in dataclasses.fields(Config)]
    mapped = [name for name, _ in table]
    for position, name in enumerate(declared):
        if name not in mapped:
            raise ConfigurationMappingError(f"unknown configuration field: {name}", field=name)
        if position >= len(mapped) or mapped[position] != name:
            raise ConfigurationMappingError(
                f"configuration field out of order: {name}", field=name
            )
    if len(mapped) > len(declared):
        extra = mapped[len(declared)]
        raise ConfigurationMappingError(f"dispatch entry without Config field: {extra}", field=extra)
