import pytest

from rtltcp import (
    SDR,
    ArgumentValidationError,
    DongleInfo,
    Opcode,
    TransportError,
    Tuner,
    decode_command,
    encode_command,
)

from conftest import RecordingConn


def sent(sdr):
    data = bytes(sdr.conn.written)
    return [decode_command(data[i:i + 5]) for i in range(0, len(data), 5)]


@pytest.mark.parametrize("method, value, opcode, parameter", [
    ("set_center_freq", 100000000, Opcode.CENTER_FREQ, 100000000),
    ("set_sample_rate", 2400000, Opcode.SAMPLE_RATE, 2400000),
    ("set_gain", 197, Opcode.TUNER_GAIN, 197),
    ("set_freq_correction", 42, Opcode.FREQ_CORRECTION, 42),
    ("set_rtl_xtal_freq", 28800000, Opcode.RTL_XTAL_FREQ, 28800000),
    ("set_tuner_xtal_freq", 28800000, Opcode.TUNER_XTAL_FREQ, 28800000),
])
def test_numeric_setters(recording_sdr, method, value, opcode, parameter):
    getattr(recording_sdr, method)(value)
    assert bytes(recording_sdr.conn.written) == encode_command(opcode, parameter)
    assert recording_sdr.conn.sends == 1


@pytest.mark.parametrize("method, opcode", [
    ("set_test_mode", Opcode.TEST_MODE),
    ("set_agc_mode", Opcode.AGC_MODE),
    ("set_direct_sampling", Opcode.DIRECT_SAMPLING),
    ("set_offset_tuning", Opcode.OFFSET_TUNING),
])
def test_flag_setters(recording_sdr, method, opcode):
    getattr(recording_sdr, method)(True)
    getattr(recording_sdr, method)(False)
    assert [(c.opcode, c.parameter) for c in sent(recording_sdr)] == [(opcode, 1), (opcode, 0)]


def test_gain_mode_is_inverted(recording_sdr):
    recording_sdr.set_gain_mode(True)
    recording_sdr.set_gain_mode(False)
    assert bytes(recording_sdr.conn.written) == bytes.fromhex("0300000000" "0300000001")


def test_negative_freq_correction_is_twos_complement(recording_sdr):
    recording_sdr.set_freq_correction(-1)
    assert bytes(recording_sdr.conn.written) == bytes.fromhex("05ffffffff")


def test_tuner_if_gain_packs_stage_and_gain(recording_sdr):
    recording_sdr.set_tuner_if_gain(2, 100)
    assert sent(recording_sdr)[0].opcode == Opcode.TUNER_IF_GAIN
    assert sent(recording_sdr)[0].parameter == 0x00020064


def test_gain_by_index_within_count(recording_sdr):
    recording_sdr.set_gain_by_index(29)
    assert bytes(recording_sdr.conn.written) == bytes.fromhex("0d0000001d")


def test_gain_by_index_over_count_writes_nothing(recording_sdr):
    with pytest.raises(ArgumentValidationError) as excinfo:
        recording_sdr.set_gain_by_index(30)
    assert excinfo.value.value == 30
    assert recording_sdr.conn.written == b""
    # connection is still usable afterwards
    recording_sdr.set_gain_by_index(0)
    assert len(recording_sdr.conn.written) == 5


def test_out_of_range_numeric_value_writes_nothing(recording_sdr):
    with pytest.raises(ArgumentValidationError):
        recording_sdr.set_center_freq(1 << 32)
    assert recording_sdr.conn.written == b""


def test_write_failure_is_transport_error():
    sdr = SDR(conn=RecordingConn(fail_with=BrokenPipeError("gone")),
              info=DongleInfo(b"RTL0", Tuner(5), 29))
    with pytest.raises(TransportError, match="CENTER_FREQ") as excinfo:
        sdr.set_center_freq(100000000)
    assert isinstance(excinfo.value.__cause__, BrokenPipeError)


def test_command_without_connection():
    with pytest.raises(TransportError):
        SDR().set_sample_rate(2400000)


def test_unknown_opcode_rejected_before_write(recording_sdr):
    with pytest.raises(ArgumentValidationError) as excinfo:
        recording_sdr.execute(14, 7)
    assert excinfo.value.value == 14
    assert recording_sdr.conn.written == b""


def test_unknown_opcode_without_connection_is_argument_error():
    with pytest.raises(ArgumentValidationError):
        SDR().execute(0, 1)
