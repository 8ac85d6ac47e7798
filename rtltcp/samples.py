"""Reader for the raw IQ byte stream that follows the rtl_tcp handshake."""

import numpy as np

from .codec import recv_exact

# rtl_tcp sends interleaved unsigned 8-bit I/Q centred on 127.5.
IQ_OFFSET = 127.5
IQ_SCALE  = 127.5


def iq_from_bytes(data: bytes) -> np.ndarray:
    """Convert interleaved uint8 I/Q bytes to complex64 in [-1, 1]. A trailing odd byte is dropped."""
    raw = np.frombuffer(data[: len(data) - (len(data) % 2)], dtype=np.uint8)
    i = (raw[0::2].astype(np.float32) - IQ_OFFSET) / IQ_SCALE
    q = (raw[1::2].astype(np.float32) - IQ_OFFSET) / IQ_SCALE
    return (i + 1j * q).astype(np.complex64)


class SampleReader:
    """
    Reads the sample stream of an open connection.
    Does not own the connection; closing is left to the SDR handle.
    """

    def __init__(self, conn):
        self._conn       = conn
        self.bytes_read  = 0
        self.blocks_read = 0

    def read(self, size: int) -> bytes:
        """Block until exactly ``size`` bytes arrive. Raises TransportError on close."""
        data = recv_exact(self._conn, size)
        self.bytes_read  += len(data)
        self.blocks_read += 1
        return data

    def read_iq(self, n_samples: int) -> np.ndarray:
        """Read ``n_samples`` complex samples (two bytes each)."""
        return iq_from_bytes(self.read(2 * n_samples))
