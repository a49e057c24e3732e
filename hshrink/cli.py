"""Command-line front end that compresses or expands byte streams."""

import getopt
import re
import sys
from contextlib import ExitStack
from dataclasses import dataclass

from .common import VERSION
from .decoder import Decoder, DecoderFinishResult, DecoderPollResult
from .encoder import Encoder, FinishResult, PollResult

DEFAULT_WINDOW_SZ2 = 11
DEFAULT_LOOKAHEAD_SZ2 = 4
DEFAULT_DECODER_INPUT_BUFFER_SIZE = 256
DEFAULT_BUFFER_SIZE = 64 * 1024

_POLL_SIZE = 4096

_USAGE = """\
Usage:
  hshrink [-h] [-e|-d] [-v] [-w SIZE] [-l BITS] [IN_FILE] [OUT_FILE]

hshrink compresses or decompresses byte streams using LZSS, and is
designed especially for embedded, low-memory, and/or hard real-time
systems.

 -h        print help
 -e        encode (compress, default)
 -d        decode (decompress)
 -v        verbose (print input & output sizes, compression ratio, etc.)

 -w SIZE   Base-2 log of LZSS sliding window size

    A larger value allows searches a larger history of the data for repeated
    patterns, potentially compressing more effectively, but will use
    more memory and processing time.
    Recommended default: -w 8 (embedded systems), -w 10 (elsewhere)
  
 -l BITS   Number of bits used for back-reference lengths

    A larger value allows longer substitutions, but since all
    back-references must use -w + -l bits, larger -w or -l can be
    counterproductive if most patterns are small and/or local.
    Recommended default: -l 4

 If IN_FILE or OUT_FILE are unspecified, they will default to
 "-" for standard input and standard output, respectively.
"""


@dataclass
class Config:
    """Settings gathered from the command line."""

    window_sz2: int = DEFAULT_WINDOW_SZ2
    lookahead_sz2: int = DEFAULT_LOOKAHEAD_SZ2
    decoder_input_buffer_size: int = DEFAULT_DECODER_INPUT_BUFFER_SIZE
    buffer_size: int = DEFAULT_BUFFER_SIZE
    verbose: int = 0
    decode: bool = False
    in_fname: str = "-"
    out_fname: str = "-"


def _usage():
    major, minor, patch = VERSION
    sys.stderr.write(f"hshrink version {major}.{minor}.{patch}\n\n")
    sys.stderr.write(_USAGE)
    raise SystemExit(1)


def _atoi(text):
    """Read a leading decimal integer the lenient way; 0 when there is none."""
    found = re.match(r"\s*([+-]?\d+)", text)
    return int(found.group(1)) if found else 0


def parse_args(argv):
    """Build a Config from the arguments (without the program name).

    Prints the usage text and raises SystemExit(1) for -h or bad options.
    """
    cfg = Config()
    try:
        opts, rest = getopt.gnu_getopt(list(argv), "hedi:w:l:v")
    except getopt.GetoptError as exc:
        sys.stderr.write(f"{exc}\n")
        _usage()
    for opt, value in opts:
        if opt == "-h":
            _usage()
        elif opt == "-e":
            cfg.decode = False
        elif opt == "-d":
            cfg.decode = True
        elif opt == "-i":
            cfg.decoder_input_buffer_size = _atoi(value)
        elif opt == "-w":
            cfg.window_sz2 = _atoi(value) & 0xFF
        elif opt == "-l":
            cfg.lookahead_sz2 = _atoi(value) & 0xFF
        elif opt == "-v":
            cfg.verbose += 1
    if rest:
        cfg.in_fname = rest[0]
    if len(rest) > 1:
        cfg.out_fname = rest[1]
    return cfg


def encode_stream(infile, outfile, window_sz2=DEFAULT_WINDOW_SZ2,
                  lookahead_sz2=DEFAULT_LOOKAHEAD_SZ2):
    """Compress everything read from INFILE into OUTFILE.

    Returns (bytes read, bytes written). Raises ValueError for bad settings.
    """
    encoder = Encoder(window_sz2, lookahead_sz2)
    chunk_size = 1 << window_sz2
    total_in = 0
    total_out = 0

    def drain():
        nonlocal total_out
        while True:
            result, chunk = encoder.poll(_POLL_SIZE)
            if chunk:
                outfile.write(chunk)
                total_out += len(chunk)
            if result is not PollResult.MORE:
                return

    while True:
        chunk = infile.read(chunk_size)
        if not chunk:
            break
        total_in += len(chunk)
        view = memoryview(chunk)
        sunk = 0
        while sunk < len(view):
            _, taken = encoder.sink(view[sunk:])
            sunk += taken
            drain()

    while encoder.finish() is FinishResult.MORE:
        drain()
    return total_in, total_out


def decode_stream(infile, outfile, window_sz2=DEFAULT_WINDOW_SZ2,
                  lookahead_sz2=DEFAULT_LOOKAHEAD_SZ2,
                  input_buffer_size=DEFAULT_DECODER_INPUT_BUFFER_SIZE):
    """Expand everything read from INFILE into OUTFILE.

    Returns (bytes read, bytes written). Raises ValueError for bad settings.
    """
    decoder = Decoder(input_buffer_size, window_sz2, lookahead_sz2)
    chunk_size = 1 << window_sz2
    total_in = 0
    total_out = 0

    def drain():
        nonlocal total_out
        while True:
            result, chunk = decoder.poll(_POLL_SIZE)
            if chunk:
                outfile.write(chunk)
                total_out += len(chunk)
            if result is not DecoderPollResult.MORE:
                return

    while True:
        chunk = infile.read(chunk_size)
        if not chunk:
            break
        total_in += len(chunk)
        view = memoryview(chunk)
        sunk = 0
        while sunk < len(view):
            _, taken = decoder.sink(view[sunk:])
            sunk += taken
            drain()

    while decoder.finish() is DecoderFinishResult.MORE:
        drain()
    return total_in, total_out


def _report(cfg, total_in, total_out):
    ratio = 100.0 - (100.0 * total_out) / total_in if total_in else float("nan")
    stream = sys.stderr if cfg.out_fname == "-" else sys.stdout
    stream.write(
        f"{cfg.in_fname} {ratio:0.2f} %\t {total_in} -> {total_out} "
        f"(-w {cfg.window_sz2} -l {cfg.lookahead_sz2})\n"
    )


def main(argv=None):
    """Run the command line; returns the process exit status."""
    if argv is None:
        argv = sys.argv[1:]
    cfg = parse_args(argv)

    if cfg.in_fname == cfg.out_fname and cfg.in_fname != "-":
        sys.stderr.write(
            f"Refusing to overwrite file '{cfg.in_fname}' with itself.\n"
        )
        return 1

    with ExitStack() as stack:
        try:
            if cfg.in_fname == "-":
                infile = sys.stdin.buffer
            else:
                infile = stack.enter_context(open(cfg.in_fname, "rb"))
            if cfg.out_fname == "-":
                outfile = sys.stdout.buffer
            else:
                outfile = stack.enter_context(open(cfg.out_fname, "wb"))
        except OSError as exc:
            sys.stderr.write(f"open: {exc.strerror or exc}\n")
            return 1

        try:
            if cfg.decode:
                totals = decode_stream(
                    infile, outfile, cfg.window_sz2, cfg.lookahead_sz2,
                    cfg.decoder_input_buffer_size,
                )
            else:
                totals = encode_stream(
                    infile, outfile, cfg.window_sz2, cfg.lookahead_sz2
                )
        except ValueError:
            if cfg.decode:
                sys.stderr.write("failed to init decoder\n")
            else:
                sys.stderr.write("failed to init encoder: bad settings\n")
            return 1
        outfile.flush()

    if cfg.verbose:
        _report(cfg, *totals)
    return 0