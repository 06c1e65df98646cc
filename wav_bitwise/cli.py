"""Command-line interface for WAV Bitwise.

WHY: Users need a scriptable way to bit-crush, invert, or mask WAV files
from the terminal, with the same flags the original console tool used
(``input.wav output.wav --right 3``).

HOW: argparse accepts the input and output paths plus exactly one
operation flag. The flag names and aliases come from the operation
catalog. The run itself is core.processor.process_wav_file(); this
module only translates arguments and renders results. Status and the
progress line go to stderr; --json output goes to stdout.

RULES:
- Positional arguments: input file, output file (output optional with --info)
- Exactly one operation flag: -r/--right, -l/--left, -n/--not, -a/--and,
  -o/--or, -z/-x/--xor
- Operands are range-checked by the core before any file is opened
- Exit codes: 0 success, 1 processing error, 2 usage error, 130 Ctrl-C
- A partially written output file is left on disk and named in the error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from wav_bitwise import __version__, config
from wav_bitwise.core.operations import OPERATIONS, OperationSpec, make_operation
from wav_bitwise.core.processor import (
    RunResult,
    inspect_wav_file,
    open_source,
    process_wav_file,
)
from wav_bitwise.core.riff import list_chunks
from wav_bitwise.core.validator import validate_operation
from wav_bitwise.errors import PARTIAL_OUTPUT_KINDS, WavBitwiseError
from wav_bitwise.models import RunSummary, WavInfoReport
from wav_bitwise.reporters import ConsoleReporter, LoggingReporter, ProgressReporter

logger = logging.getLogger(__name__)

# Option strings per canonical operation name, in usage order
_OPERATION_FLAGS = {
    "right": ("-r", "--right"),
    "left": ("-l", "--left"),
    "not": ("-n", "--not"),
    "and": ("-a", "--and"),
    "or": ("-o", "--or"),
    "xor": ("-z", "-x", "--xor"),
}


def _status(msg: str) -> None:
    """Print a status message to stderr.

    Status output must not pollute stdout so --json output can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


class _OperationAction(argparse.Action):
    """Store the selected operation as (canonical name, operand)."""

    def __init__(self, option_strings, dest, operation_name: str = "", **kwargs):
        self.operation_name = operation_name
        super().__init__(option_strings, dest, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        if getattr(namespace, self.dest, None) is not None:
            parser.error("only one operation may be given")
        value = values if isinstance(values, int) else 0
        setattr(namespace, self.dest, (self.operation_name, value))


def _window_size(raw: str) -> int:
    try:
        return config.parse_window_size(raw)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def _log_level(raw: str) -> str:
    try:
        config.parse_log_level(raw)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))
    return raw


def _operations_epilog() -> str:
    lines = ["Operations:"]
    for name, template in OPERATIONS.items():
        flags = " ".join(_OPERATION_FLAGS[name])
        if template.operand_range is None:
            lines.append("  {:<20}{}".format(flags, template.label))
        else:
            low, high = template.operand_range
            lines.append("  {:<20}{} ({}-{})".format(flags, template.label, low, high))
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    Separate from main() so tests can inspect the parser without
    running anything.
    """
    parser = argparse.ArgumentParser(
        prog="wav-bitwise",
        description="Apply a bitwise operation to the sample bytes of a PCM WAV "
                    "file, keeping every header and metadata chunk intact.",
        epilog=_operations_epilog(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("input_file", help="Path to the input WAV file.")
    parser.add_argument(
        "output_file",
        nargs="?",
        default=None,
        help="Path of the WAV file to write (not needed with --info).",
    )

    ops = parser.add_argument_group("operation (exactly one)")
    for name, template in OPERATIONS.items():
        if template.operand_range is None:
            ops.add_argument(
                *_OPERATION_FLAGS[name],
                dest="operation",
                action=_OperationAction,
                operation_name=name,
                nargs=0,
                help=template.label + ".",
            )
        else:
            low, high = template.operand_range
            ops.add_argument(
                *_OPERATION_FLAGS[name],
                dest="operation",
                action=_OperationAction,
                operation_name=name,
                type=int,
                metavar="VALUE",
                help="{} ({}-{}).".format(template.label, low, high),
            )

    parser.add_argument(
        "--info",
        action="store_true",
        help="Print the WAV format and chunk layout and exit.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Write file info or the run summary to stdout as JSON.",
    )
    parser.add_argument(
        "--window-size",
        type=_window_size,
        default=None,
        metavar="BYTES",
        help="Transfer window size in bytes (default: {}).".format(config.WINDOW_SIZE),
    )
    parser.add_argument(
        "--trailing",
        action=argparse.BooleanOptionalAction,
        default=config.COPY_TRAILING,
        help="Copy chunks that follow the sample data (default: %(default)s).",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress status and progress output.",
    )
    parser.add_argument(
        "--log-level",
        type=_log_level,
        default=None,
        help="Logging level (default: WAV_BITWISE_LOG_LEVEL or {}).".format(config.LOG_LEVEL),
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s {}".format(__version__),
    )
    parser.set_defaults(operation=None)
    return parser


def _print_info(report: WavInfoReport) -> None:
    _status("WAV file info:")
    _status("  Format: {}".format("PCM" if report.audio_format == 1 else report.audio_format))
    _status("  Channels: {}".format(report.channels))
    _status("  Sample rate: {} Hz".format(report.sample_rate))
    _status("  Bits per sample: {}".format(report.bits_per_sample))
    _status("  Data size: {} bytes".format(report.data_size))
    _status("  Data offset: {} bytes".format(report.data_offset))
    if report.duration_s is not None:
        _status("  Duration: {:.2f} s".format(report.duration_s))


def _run_info(args: argparse.Namespace) -> int:
    path = Path(args.input_file)
    with open_source(path) as source:
        chunks = list_chunks(source)
    descriptor, region = inspect_wav_file(path)
    report = WavInfoReport.from_parse(path, descriptor, region, chunks)

    if args.json:
        print(report.model_dump_json(indent=2))
        return 0

    _print_info(report)
    _status("  Chunks:")
    for chunk in report.chunks:
        _status("    {:<4} @ {}, size={}".format(chunk.id, chunk.offset, chunk.size))
    return 0


def _run_transform(args: argparse.Namespace, operation: OperationSpec) -> int:
    input_path = Path(args.input_file)
    output_path = Path(args.output_file)
    quiet = args.quiet or args.json

    if not quiet:
        _status("Operation: {}".format(operation.describe()))
        descriptor, region = inspect_wav_file(input_path)
        _print_info(WavInfoReport.from_parse(input_path, descriptor, region))
        _status("Processing audio data...")

    reporter: ProgressReporter = LoggingReporter() if quiet else ConsoleReporter()
    result: RunResult = process_wav_file(
        input_path,
        output_path,
        operation,
        reporter=reporter,
        window_size=args.window_size,
        copy_trailing=args.trailing,
    )

    if args.json:
        print(RunSummary.from_result(result).model_dump_json(indent=2))
    elif not quiet:
        _status("Done! Result saved to {}".format(result.output_path))
    return 0


def run(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    """Execute a parsed command line and return the exit code."""
    if args.info:
        try:
            return _run_info(args)
        except WavBitwiseError as e:
            print("Error: {}".format(e), file=sys.stderr)
            return 1

    if args.operation is None:
        parser.error("an operation is required (one of {})".format(
            ", ".join(flags[-1] for flags in _OPERATION_FLAGS.values())
        ))
    if args.output_file is None:
        parser.error("the output file is required")

    try:
        name, value = args.operation
        operation = make_operation(name, value)
        # Range errors are reported before any file is opened
        validate_operation(operation)
        return _run_transform(args, operation)
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        return 130
    except WavBitwiseError as e:
        print("Error: {}".format(e), file=sys.stderr)
        if e.kind in PARTIAL_OUTPUT_KINDS:
            print("Partial output left at {}".format(args.output_file), file=sys.stderr)
        return 1


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    argv=None means use sys.argv; an explicit list is for testing.
    Exits with a non-zero status on failure.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    config.configure_logging(args.log_level)
    code = run(args, parser)
    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
