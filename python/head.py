#!/usr/bin/env python3
"""
Name: head
Description: print the first lines or bytes of each file
License: perl
"""

import sys
import os
import argparse
import re
from collections import namedtuple

__version__ = '0.1.0'

DEFAULT_LINES = '10'
STDIN_NAME = '-'
CHUNK_SIZE = 65536

# Options that consume the next token as their value.
VALUE_OPTIONS = ('-n', '--lines', '-c', '--bytes')


class HeadError(Exception):
    """Base class for everything head reports on stderr."""


class ConfigError(HeadError):
    """Malformed or conflicting arguments; raised before any source is read."""


class SourceError(HeadError):
    """A single source could not be opened or read."""

    def __init__(self, name, reason):
        super().__init__(f"{name}: {reason}")
        self.name = name
        self.reason = reason


class Config(namedtuple('Config', 'sources line_count byte_count')):
    """The validated settings for one run. Read-only once built."""

    __slots__ = ()

    def __new__(cls, sources=(STDIN_NAME,), line_count=10, byte_count=None):
        if isinstance(sources, (str, bytes)):
            raise TypeError("sources must be a sequence of names, not a single name")
        if line_count <= 0:
            raise ValueError(f"line_count must be positive, got {line_count}")
        if byte_count is not None and byte_count <= 0:
            raise ValueError(f"byte_count must be positive, got {byte_count}")
        return super().__new__(cls, tuple(sources) or (STDIN_NAME,),
                               line_count, byte_count)

    @property
    def mode(self) -> str:
        return 'bytes' if self.byte_count is not None else 'lines'


class _Parser(argparse.ArgumentParser):
    """argparse, but usage errors raise ConfigError instead of exiting."""

    def error(self, message):
        raise ConfigError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        description="Print the first lines (or bytes) of each file.",
        usage="%(prog)s [-n LINES | -c BYTES] [FILES ...]"
    )
    parser.add_argument('-V', '--version', action='version',
                        version=f"%(prog)s {__version__}")
    count = parser.add_mutually_exclusive_group()
    count.add_argument(
        '-n', '--lines',
        metavar='LINES',
        help=f'Number of lines to print (default: {DEFAULT_LINES}).'
    )
    count.add_argument(
        '-c', '--bytes',
        metavar='BYTES',
        help='Number of bytes to print; overrides the line count.'
    )
    parser.add_argument(
        'files',
        nargs='*',
        metavar='FILES',
        help='Files to process. "-" (the default) reads stdin.'
    )
    return parser


def preprocess_argv(args_list: list) -> list:
    """
    Translates the historical '-NUMBER' syntax to the standard '-n NUMBER'.
    For example, '-20' becomes ['-n', '20'], but the '-1' in '-c -1' is
    left alone as the value of -c.
    """
    processed_args = []
    expecting_value = False
    end_of_options = False
    for arg in args_list:
        if expecting_value or end_of_options:
            processed_args.append(arg)
            expecting_value = False
            continue
        if arg == '--':
            end_of_options = True
            processed_args.append(arg)
            continue
        match = re.fullmatch(r'-([0-9]+)', arg)
        if match:
            processed_args.extend(['-n', match.group(1)])
        else:
            processed_args.append(arg)
            expecting_value = arg in VALUE_OPTIONS
    return processed_args


def parse_positive_int(value: str) -> int:
    """
    Returns the value of an unsigned decimal literal greater than zero.
    Raises ValueError carrying the literal text otherwise.
    """
    if not re.fullmatch(r'\+?[0-9]+', value):
        raise ValueError(value)
    number = int(value)
    if number <= 0 or number > sys.maxsize:
        raise ValueError(value)
    return number


def parse_args(argv=None) -> Config:
    """Turns command-line tokens into a Config, or raises ConfigError."""
    if argv is None:
        argv = sys.argv[1:]
    args = build_parser().parse_args(preprocess_argv(list(argv)))

    lines = args.lines if args.lines is not None else DEFAULT_LINES
    try:
        line_count = parse_positive_int(lines)
    except ValueError as e:
        raise ConfigError(f"illegal line count -- {e}") from None

    byte_count = None
    if args.bytes is not None:
        try:
            byte_count = parse_positive_int(args.bytes)
        except ValueError as e:
            raise ConfigError(f"illegal byte count -- {e}") from None

    return Config(sources=args.files or [STDIN_NAME],
                  line_count=line_count, byte_count=byte_count)


class Source:
    """
    A named binary input: stdin for '-', otherwise a file opened from disk.
    Read failures surface as SourceError; the caller's stdin is never closed.
    """

    def __init__(self, name, stdin=None):
        self.name = name
        self._owned = False
        if name == STDIN_NAME:
            self._stream = stdin if stdin is not None else sys.stdin.buffer
        else:
            try:
                self._stream = open(name, 'rb')
            except OSError as e:
                raise SourceError(name, e.strerror or str(e)) from e
            self._owned = True

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
        return False

    def close(self):
        if self._owned:
            self._stream.close()
            self._owned = False

    def readline(self) -> bytes:
        try:
            return self._stream.readline()
        except OSError as e:
            raise SourceError(self.name, e.strerror or str(e)) from e

    def read(self, size: int) -> bytes:
        try:
            return self._stream.read(size)
        except OSError as e:
            raise SourceError(self.name, e.strerror or str(e)) from e


def print_lines(source: Source, count: int, out) -> None:
    """Copies up to `count` lines, as raw bytes, one line at a time."""
    for _ in range(count):
        line = source.readline()
        if not line:
            break
        out.write(line)


def print_bytes(source: Source, count: int, out) -> None:
    """Copies the first `count` bytes, decoded lossily as UTF-8."""
    chunks = []
    remaining = count
    while remaining:
        chunk = source.read(min(remaining, CHUNK_SIZE))
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    data = b''.join(chunks)
    out.write(data.decode('utf-8', errors='replace').encode('utf-8'))


def run(config: Config, stdin=None, stdout=None, stderr=None) -> int:
    """
    Prints the head of every source in order. Unopenable or unreadable
    sources are reported on stderr and skipped; write errors propagate.
    """
    out = stdout if stdout is not None else sys.stdout.buffer
    err = stderr if stderr is not None else sys.stderr
    is_multi_file = len(config.sources) > 1

    for index, name in enumerate(config.sources):
        try:
            with Source(name, stdin=stdin) as source:
                if is_multi_file:
                    separator = b'\n' if index > 0 else b''
                    out.write(separator + b'==> ' + os.fsencode(name) + b' <==\n')
                if config.mode == 'bytes':
                    print_bytes(source, config.byte_count, out)
                else:
                    print_lines(source, config.line_count, out)
        except SourceError as e:
            out.flush()
            print(e, file=err)
    out.flush()
    return 0


def main(argv=None):
    """Parses arguments and prints the head of each file or stdin."""
    program_name = os.path.basename(sys.argv[0])
    try:
        config = parse_args(argv)
    except ConfigError as e:
        print(f"{program_name}: {e}", file=sys.stderr)
        print(build_parser().format_usage().rstrip(), file=sys.stderr)
        sys.exit(1)

    try:
        exit_status = run(config)
    except BrokenPipeError:
        # Python flushes stdout at exit; point it somewhere harmless first.
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        sys.exit(1)

    sys.exit(exit_status)


if __name__ == "__main__":
    main()
