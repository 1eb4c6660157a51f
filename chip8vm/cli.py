"""Command line entry point."""

import argparse
import logging
import os
import random
import sys
from typing import List, Optional

from .constants import DEFAULT_CLOCK_HZ, DEFAULT_SEED, TRACE
from .errors import Chip8Error
from .host import ConsoleHost, PygameHost
from .interpreter import Dialect, Interpreter
from .loader import load_rom_file
from .scheduler import Scheduler
from .state import MachineState

logger = logging.getLogger(__name__)

logging.addLevelName(TRACE, "TRACE")


def positive_int(text: str) -> int:
    """argparse type for rates: an integer above zero"""
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {text!r}")
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chip8vm", description="Run a CHIP-8 ROM.")
    parser.add_argument("-r", "--rom", required=True, metavar="FILE",
                        help="Path to CHIP-8 ROM file to run")
    parser.add_argument("-s", "--step", action="store_true",
                        help="Execute one cycle at a time, confirming each with n/q")
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED,
                        help="Seed for the random number generator (default: %(default)s)")
    parser.add_argument("--dialect", choices=[d.value for d in Dialect],
                        default=Dialect.ORIGINAL.value,
                        help="Behaviour of the ambiguous 8XY6/8XYE/BNNN opcodes")
    parser.add_argument("--clock", type=positive_int, default=DEFAULT_CLOCK_HZ, metavar="HZ",
                        help="Instructions per second (default: %(default)s)")
    parser.add_argument("--window", action="store_true",
                        help="Show the display in a pygame window instead of the log")

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-q", "--quiet", action="store_true",
                           help="Enable quiet logging")
    verbosity.add_argument("-d", "--debug", action="store_true",
                           help="Enable debug level logging")
    verbosity.add_argument("-t", "--trace", action="store_true",
                           help="Enable trace level logging")
    return parser


def log_level(args: argparse.Namespace) -> int:
    if args.trace:
        return TRACE
    elif args.debug:
        return logging.DEBUG
    elif args.quiet:
        return logging.WARNING
    return logging.INFO


def configure_logging(args: argparse.Namespace):
    logging.basicConfig(
        level=log_level(args),
        format="%(asctime)s %(levelname)-5s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def attach_window(scheduler: Scheduler, window: PygameHost):
    """Send frames to the window and stop once it is closed

    Events are drained every cycle, not only on redraw, so ROMs that never
    draw still react to the window being closed.
    """
    def on_cycle():
        if window.pump():
            scheduler.stop()

    scheduler.on_frame = window
    scheduler.on_cycle = on_cycle


def run(args: argparse.Namespace) -> int:
    """Build the machine from parsed args and run it to completion"""
    if not os.path.exists(args.rom):
        logger.error("rom file `%s` does not exist", args.rom)
        return 1

    state = MachineState()
    interpreter = Interpreter(state, rng=random.Random(args.seed),
                              dialect=Dialect(args.dialect))
    scheduler = Scheduler(interpreter, stepping=args.step, clock_hz=args.clock)

    window = None
    if args.window:
        window = PygameHost(title=os.path.basename(args.rom))
        attach_window(scheduler, window)
    else:
        scheduler.on_frame = ConsoleHost()

    try:
        load_rom_file(state, args.rom)
        logger.debug("seed: %d, dialect: %s, stepping: %s",
                     args.seed, interpreter.dialect.value, args.step)
        scheduler.run()
    except Chip8Error as e:
        logger.error("%s", e)
        logger.debug("machine state: %s", state)
        return 1
    finally:
        if window is not None:
            window.close()

    logger.info("stopped after %d cycles", scheduler.cycles)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)
    configure_logging(args)
    logger.debug("args: %s", args)
    try:
        return run(args)
    except KeyboardInterrupt:
        return 130
