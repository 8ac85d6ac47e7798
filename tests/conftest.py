import socket

import pytest

from rtltcp import DongleInfo, SDR, Tuner

DONGLE_INFO_BYTES = bytes.fromhex("52544c30000000010000000a")


class RecordingConn:
    """Socket stand-in that keeps everything written to it."""

    def __init__(self, fail_with=None):
        self.written = bytearray()
        self.sends = 0
        self.fail_with = fail_with
        self.closed = False

    def sendall(self, data):
        if self.fail_with is not None:
            raise self.fail_with
        self.sends += 1
        self.written += data

    def recv(self, size):
        return b""

    def close(self):
        self.closed = True


@pytest.fixture
def pipe():
    local, remote = socket.socketpair()
    local.settimeout(5)
    remote.settimeout(5)
    yield local, remote
    local.close()
    remote.close()


@pytest.fixture
def recording_sdr():
    info = DongleInfo(magic=b"RTL0", tuner=Tuner(5), gain_count=29)
    return SDR(conn=RecordingConn(), info=info)
