"""utf8check CLI entrypoint."""

import argparse
import sys
from pathlib import Path
from typing import BinaryIO, List, Optional

from utf8check.core import (
    CheckLog,
    StreamValidator,
    SuiteRunner,
    classify,
    pending,
    validate,
)

DEFAULT_CHUNK_SIZE = 65536


def _make_log(path: Optional[str]) -> CheckLog:
    return CheckLog(Path(path) if path else None)


def scan_stream(handle: BinaryIO, chunk_size: int) -> StreamValidator:
    stream = StreamValidator()
    while True:
        chunk = handle.read(chunk_size)
        if not chunk:
            break
        stream.feed(chunk)
        if stream.rejected:
            break
    return stream


def describe(stream: StreamValidator) -> str:
    if stream.complete:
        return "valid"
    if stream.rejected:
        return f"invalid (offset={stream.error_offset})"
    return f"incomplete (offset={stream.consumed}, missing={stream.pending})"


def check_files(args: argparse.Namespace) -> int:
    log = _make_log(args.log)
    failures = 0
    log.log(f"check start inputs={len(args.paths)} chunk_size={args.chunk_size}")

    for name in args.paths:
        try:
            if name == "-":
                stream = scan_stream(sys.stdin.buffer, args.chunk_size)
            else:
                with open(name, "rb") as handle:
                    stream = scan_stream(handle, args.chunk_size)
        except OSError as exc:
            failures += 1
            print(f"{name}: error: {exc.strerror or exc}", file=sys.stderr)
            log.log(f"{name} error {exc.strerror or exc}")
            continue

        verdict = describe(stream)
        if not stream.complete:
            failures += 1
        print(f"{name}: {verdict}")
        log.log(f"{name} {verdict}")

    log.log(f"check done failed={failures}")
    return 1 if failures else 0


def run_selftest(args: argparse.Namespace) -> int:
    runner = SuiteRunner(
        artifacts_path=Path(args.artifacts) if args.artifacts else None,
        include_demo_failure=args.demo_fail,
        color=args.color,
        log=_make_log(args.log),
    )
    return runner.run().exit_code


def show_state(args: argparse.Namespace) -> int:
    state = validate(args.data)
    print(f"state={state} kind={classify(state)} pending={pending(state)}")
    return 0


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer: {value}")
    return number


def _hex_bytes(value: str) -> bytes:
    try:
        return bytes.fromhex(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a hex byte string: {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="UTF-8 validation CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser("check", help="Validate files as UTF-8")
    check_parser.add_argument("paths", nargs="+", help="Files to validate, '-' for stdin")
    check_parser.add_argument(
        "--chunk-size",
        type=_positive_int,
        default=DEFAULT_CHUNK_SIZE,
        help="Bytes read per chunk",
    )
    check_parser.add_argument("--log", default=None, help="Append check events to this file")
    check_parser.set_defaults(func=check_files)

    selftest_parser = subparsers.add_parser("selftest", help="Run the built-in scenario suite")
    selftest_parser.add_argument(
        "--demo-fail", action="store_true", help="Add a check that is expected to fail"
    )
    selftest_parser.add_argument(
        "--artifacts", default=None, help="Directory where result artifacts are written"
    )
    selftest_parser.add_argument("--color", action="store_true", help="Colorize PASS/FAIL tags")
    selftest_parser.add_argument("--log", default=None, help="Append run events to this file")
    selftest_parser.set_defaults(func=run_selftest)

    state_parser = subparsers.add_parser("state", help="Show the state reached after hex bytes")
    state_parser.add_argument("data", type=_hex_bytes, help="Bytes as hex, e.g. 'F0 9F'")
    state_parser.set_defaults(func=show_state)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
