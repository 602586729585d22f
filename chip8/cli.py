import argparse
import logging
import random
import sys
from pathlib import Path

from . import config
from .cpu import Interpreter
from .errors import LoadOverflow

logger = logging.getLogger("chip8")


def positive_int(text):
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError("must be at least 1, got %s" % text)
    return value


def build_parser():
    aparser = argparse.ArgumentParser(prog="chip8", description="CHIP-8 emulator")
    aparser.add_argument("rom", help="Path to a CHIP-8 ROM image")
    aparser.add_argument("--scale", type=positive_int, default=config.scale,
                         help="Screen pixels per CHIP-8 pixel (default: %(default)s)")
    aparser.add_argument("--cpu-hz", type=positive_int, default=config.cpu_hz,
                         help="Instructions per second (default: %(default)s)")
    aparser.add_argument("--seed", type=int, default=None,
                         help="Seed for the CXNN random source")
    aparser.add_argument("--strict", action="store_true",
                         help="Stop on unknown opcodes instead of skipping them")
    aparser.add_argument("-v", "--verbose", action="store_true",
                         help="Enable verbose debug logging")
    return aparser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(name)s: %(message)s")
    if args.verbose:
        logger.setLevel(logging.DEBUG)

    chip8 = Interpreter(rng=random.Random(args.seed), strict=args.strict)
    rom = Path(args.rom)
    try:
        chip8.load_rom(rom)
    except (OSError, LoadOverflow) as e:
        logger.error("ROM load failed: %s", e)
        return 1

    # pyglet is only needed once there is something to show
    from .window import run
    run(chip8, rom_name=rom.name, scale=args.scale, cpu_hz=args.cpu_hz)
    return 0


if __name__ == "__main__":
    sys.exit(main())
