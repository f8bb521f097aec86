import argparse
import os
import sys

from redpanda.config import DEFAULT_MAX_HEIGHT, DEFAULT_MAX_WIDTH, GraphicsProtocol, RenderConfig
from redpanda.dispatch import Dispatcher
from redpanda.errors import IoFailure, RedpandaError
from redpanda.logging_setup import configure_logging
from redpanda.terminal import Sink, lock_output

PROG = "rp"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG, description="Concatenate and print files, drawing images inline with terminal graphics"
    )
    parser.add_argument(
        "-b", dest="number_nonblank", action="store_true", help="Number the non-blank output lines, starting at 1"
    )
    parser.add_argument(
        "-e", dest="show_ends", action="store_true", help="Like -v, and display a dollar sign at the end of each line"
    )
    parser.add_argument(
        "-l", dest="lock", action="store_true", help="Set an exclusive advisory lock on standard output"
    )
    parser.add_argument("-n", dest="number", action="store_true", help="Number the output lines, starting at 1")
    parser.add_argument(
        "-s", dest="squeeze_blank", action="store_true", help="Squeeze multiple adjacent empty lines into one"
    )
    parser.add_argument("-t", dest="show_tabs", action="store_true", help="Like -v, and display tab characters as ^I")
    parser.add_argument("-u", dest="unbuffered", action="store_true", help="Flush output after every line")
    parser.add_argument(
        "-v", dest="show_nonprinting", action="store_true", help="Display non-printing characters so they are visible"
    )
    parser.add_argument(
        "--max-width", type=int, default=DEFAULT_MAX_WIDTH, help=f"Maximum image width in pixels (default: {DEFAULT_MAX_WIDTH})"
    )
    parser.add_argument(
        "--max-height",
        type=int,
        default=DEFAULT_MAX_HEIGHT,
        help=f"Maximum image height in pixels (default: {DEFAULT_MAX_HEIGHT})",
    )
    parser.add_argument(
        "--protocol",
        default=GraphicsProtocol.KITTY.value,
        choices=[p.value for p in GraphicsProtocol],
        help="Terminal graphics protocol for images (default: kitty)",
    )
    parser.add_argument(
        "--colors", type=int, default=None, help="Limit the sixel palette to this many colours (2-256, default: 256)"
    )
    parser.add_argument(
        "--background",
        default="000000",
        help="Colour transparent pixels are blended onto for sixel, as RRGGBB (default: 000000)",
    )
    parser.add_argument(
        "--no-sniff",
        dest="sniff",
        action="store_false",
        help="Only treat files with an image suffix as images, never inspect contents",
    )
    parser.add_argument("--debug", action="store_true", help="Log classification and encoding details to stderr")
    parser.add_argument("files", nargs="*", help="Files to print; '-' or none reads standard input")
    return parser


def _silence_stdout() -> None:
    # Later flushes of sys.stdout at exit must not hit the closed pipe again
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, sys.stdout.fileno())


def main(argv=None, stdin=None, stdout=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    log = configure_logging(args.debug)

    try:
        config = RenderConfig.from_args(args)
    except ValueError as exc:
        parser.error(str(exc))
    if config.colors is not None and config.protocol is not GraphicsProtocol.SIXEL:
        log.warning("--colors only applies to --protocol sixel; ignoring it")

    to_terminal = stdout is None
    stdout = sys.stdout.buffer if stdout is None else stdout
    stdin = sys.stdin.buffer if stdin is None else stdin

    try:
        if config.lock:
            lock_output(stdout)
        sink = Sink(stdout, unbuffered=config.unbuffered)
        Dispatcher(config, sink, stdin=stdin).run(args.files)
    except IoFailure as exc:
        if isinstance(exc.__cause__, BrokenPipeError):
            if to_terminal:
                _silence_stdout()
            sys.exit(1)
        print(f"{PROG}: {exc}", file=sys.stderr)
        sys.exit(1)
    except RedpandaError as exc:
        print(f"{PROG}: {exc}", file=sys.stderr)
        sys.exit(1)
