"""Command-line rtl_tcp test receiver."""

import argparse
import logging
import time

import numpy as np

from . import si
from .common import DEFAULT_ADDRESS, log
from .errors import RtlTcpError, TransportError
from .models import default_config
from .tcp_client import SDR


def _configure_logging(level_name: str):
    level = getattr(logging, level_name.upper(), logging.INFO)
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=level, format='%(asctime)s %(levelname)s %(message)s')
    else:
        root_logger.setLevel(level)

    logging.getLogger('rtltcp').setLevel(level)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="rtl_tcp test receiver")
    parser.add_argument("--address", default=DEFAULT_ADDRESS, help="Server <host>:<port>")
    parser.add_argument("--timeout", default=5.0, type=float, help="Connect timeout in seconds")
    parser.add_argument("--freq", default="100M", help="Center frequency, SI suffix allowed")
    parser.add_argument("--rate", default="2.4M", help="Sample rate, SI suffix allowed")
    parser.add_argument("--gain", default=0.0, type=float, help="Tuner gain in dB")
    parser.add_argument("--gain-mode", action="store_true", help="Enable manual tuner gain")
    parser.add_argument("--ppm", default=0, type=int, help="Frequency correction in PPM")
    parser.add_argument("--agc", action="store_true", help="Enable RTL AGC")
    parser.add_argument("--direct-sampling", action="store_true", help="Enable direct sampling")
    parser.add_argument("--offset-tuning", action="store_true", help="Enable offset tuning")
    parser.add_argument("--gain-index", default=0, type=int, help="Gain by index")
    parser.add_argument("--secs", default=5, type=int, help="Seconds to run")
    parser.add_argument("--block", default=16384, type=int, help="Bytes per read")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Logging verbosity (default: INFO)")
    return parser


def config_from_args(args):
    center_freq = si.try_parse(args.freq)
    if center_freq is None:
        raise ValueError(f"--freq: invalid frequency {args.freq!r}")
    sample_rate = si.try_parse(args.rate)
    if sample_rate is None:
        raise ValueError(f"--rate: invalid sample rate {args.rate!r}")

    config = default_config()
    config.center_freq     = center_freq
    config.sample_rate     = sample_rate
    config.tuner_gain_mode = args.gain_mode
    config.tuner_gain      = args.gain
    config.freq_correction = args.ppm
    config.agc_mode        = args.agc
    config.direct_sampling = args.direct_sampling
    config.offset_tuning   = args.offset_tuning
    config.gain_by_index   = args.gain_index
    return config


def main(argv=None) -> int:
    args = _build_parser().parse_args(argv)
    _configure_logging(args.log_level)

    try:
        config = config_from_args(args)
    except ValueError as e:
        log.error(str(e))
        return 2

    try:
        with SDR.open(args.address, timeout=args.timeout, config=config) as sdr:
            log.info(f"Tuner {sdr.info.tuner}, {sdr.info.gain_count} gain steps")
            sdr.configure()
            log.info(f"Receiving {si.format_si(config.center_freq)}Hz "
                     f"at {si.format_si(config.sample_rate)}S/s")

            reader = sdr.sample_reader()
            t_end = time.time() + args.secs
            while time.time() < t_end:
                try:
                    samples = reader.read_iq(args.block // 2)
                except TransportError as e:
                    log.warning(f"Sample stream ended: {e}")
                    break
                if reader.blocks_read % 50 == 0:
                    power = float(np.mean(np.abs(samples) ** 2))
                    log.info(f"Blocks: {reader.blocks_read}  Bytes: {reader.bytes_read}  "
                             f"Mean power: {10 * np.log10(power + 1e-12):.1f} dBFS")

            log.info(f"Done. {reader.blocks_read} blocks, {reader.bytes_read} bytes")
    except KeyboardInterrupt:
        log.info("Interrupted")
    except RtlTcpError as e:
        log.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
