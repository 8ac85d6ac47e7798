"""Data structures for the rtl_tcp handshake, commands and device configuration."""

from dataclasses import dataclass

from . import si
from .common import DONGLE_MAGIC, TUNER_NAMES


class Tuner(int):
    """Tuner type code reported by the dongle. Unknown codes are kept, not rejected."""

    @property
    def name(self) -> str:
        return TUNER_NAMES.get(int(self), "UNKNOWN")

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Tuner({int(self)}, {self.name!r})"


@dataclass(frozen=True)
class DongleInfo:
    """Identity record sent by the server right after connect."""
    magic:      bytes
    tuner:      Tuner
    gain_count: int     # number of entries usable with set_gain_by_index

    def is_valid(self) -> bool:
        return self.magic == DONGLE_MAGIC

    def __str__(self) -> str:
        magic = self.magic.decode("ascii", errors="replace")
        return f"{{Magic:{magic!r} Tuner:{self.tuner} GainCount:{self.gain_count}}}"


@dataclass(frozen=True)
class Command:
    opcode:    int      # u8
    parameter: int      # u32, big-endian on the wire


@dataclass
class Config:
    """Every knob applied by SDR.configure(), in the order it is applied."""
    center_freq:     float = 0.0    # Hz
    sample_rate:     float = 0.0    # Hz
    tuner_gain_mode: bool  = False  # True selects manual gain
    tuner_gain:      float = 0.0    # dB
    freq_correction: int   = 0      # PPM
    test_mode:       bool  = False
    agc_mode:        bool  = False  # RTL2832 digital AGC
    direct_sampling: bool  = False
    offset_tuning:   bool  = False
    rtl_xtal_freq:   int   = 0      # Hz
    tuner_xtal_freq: int   = 0      # Hz
    gain_by_index:   int   = 0


def default_config() -> Config:
    return Config(center_freq=si.parse("100M"), sample_rate=si.parse("2.4M"))
