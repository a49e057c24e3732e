# hshrink

LZSS compression built for streams and small memory budgets. Data is
encoded as a sequence of tagged bit fields: a literal byte, or a
back-reference of `window_sz2` index bits and `lookahead_sz2` length bits
into a sliding window of the last `2 ** window_sz2` bytes.

The encoder and decoder are incremental state machines: feed input in
pieces of any size, pull output in pieces of any size, and tell them when
the input has ended. Nothing has to fit in memory at once.

## Installing

    pip install .

For the test suite:

    pip install ".[test]"
    pytest

## Parameters

- `window_sz2`: base-2 log of the sliding window, from 4 to 15.
- `lookahead_sz2`: number of bits for back-reference lengths, at least 3
  and less than `window_sz2`.
- `input_buffer_size`: size of the decoder's internal input buffer, from
  1 to 65535. It affects memory use only, not the output.

The decoder must use the same `window_sz2` and `lookahead_sz2` that the
data was compressed with. Invalid settings raise `ValueError` (the checks
live in `hshrink.common.validate_params`). Sinking more input into the
encoder after `finish()`, or before its pending input has been polled,
raises `hshrink.common.MisuseError`, a subclass of `HeatshrinkError`.

## Whole buffers

```python
from hshrink.encoder import compress
from hshrink.decoder import decompress

packed = compress(b"abcdabcdabcd", 8, 4)
assert decompress(packed, 8, 4, 256) == b"abcdabcdabcd"
```

Both default to `window_sz2=11` and `lookahead_sz2=4`; `decompress`
defaults to an input buffer of 256 bytes.

## Streaming

`hshrink.encoder.Encoder` and `hshrink.decoder.Decoder` expose the
underlying state machines:

- `sink(data)` copies as much of `data` as fits and returns the result
  and the number of bytes taken.
- `poll(out_size)` returns the result and up to `out_size` bytes of
  output; `MORE` means the limit was hit and another poll gives more.
- `finish()` marks the end of input and returns `DONE` once all output
  has been produced, `MORE` while polling is still needed.
- `reset()` returns the object to its initial state so it can be reused.

Results are the `SinkResult`, `PollResult` and `FinishResult`
enumerations in `hshrink.encoder`, and `DecoderSinkResult`,
`DecoderPollResult` and `DecoderFinishResult` in `hshrink.decoder`. The
decoder's `sink` returns `FULL` with zero bytes taken when its input
buffer has no room.

```python
from hshrink.encoder import Encoder, FinishResult

enc = Encoder(8, 4)
enc.sink(b"aaaaa")
enc.finish()
out = bytearray()
while True:
    _, chunk = enc.poll(64)
    out.extend(chunk)
    if enc.finish() is FinishResult.DONE:
        break
```

For binary file-like objects, `hshrink.cli.encode_stream(infile, outfile,
window_sz2, lookahead_sz2)` and `hshrink.cli.decode_stream(infile,
outfile, window_sz2, lookahead_sz2, input_buffer_size)` run the whole
loop and return the number of bytes read and written.

## Command line

    hshrink [-h] [-e|-d] [-v] [-w SIZE] [-l BITS] [-i SIZE] [IN_FILE] [OUT_FILE]

- `-e` compress (the default), `-d` decompress
- `-w SIZE` window bits (default 11)
- `-l BITS` back-reference length bits (default 4)
- `-i SIZE` decoder input buffer size (default 256)
- `-v` print input and output sizes and the compression ratio
- `-h` print the usage text

`IN_FILE` and `OUT_FILE` default to `-`, standard input and standard
output. A file is never overwritten with itself. The command exits with
status 1 on bad options, files that cannot be opened, or invalid
settings.

    hshrink -w 8 -l 4 firmware.bin firmware.hs
    hshrink -d -w 8 -l 4 firmware.hs firmware.bin

## What it does not do

The compressed stream is raw bits with no header, checksum or length:
the window and lookahead settings are not stored, so the reader has to
know them, and corrupted input is not detected. There is no archive or
container format around the stream.