"""Streaming LZSS encoder with a sink/poll/finish interface."""

from enum import Enum, IntEnum

from .common import (
    BACKREF_MARKER,
    LITERAL_MARKER,
    MisuseError,
    validate_params,
)
from .match import build_index, find_longest_match


class SinkResult(Enum):
    """Outcome of feeding input into the encoder."""

    OK = 0


class PollResult(Enum):
    """Outcome of asking the encoder for output."""

    EMPTY = 0
    MORE = 1


class FinishResult(Enum):
    """Outcome of telling the encoder the input has ended."""

    DONE = 0
    MORE = 1


class _State(IntEnum):
    NOT_FULL = 0
    FILLED = 1
    SEARCH = 2
    YIELD_TAG_BIT = 3
    YIELD_LITERAL = 4
    YIELD_BR_INDEX = 5
    YIELD_BR_LENGTH = 6
    SAVE_BACKLOG = 7
    FLUSH_BITS = 8
    DONE = 9


class Encoder:
    """Incremental compressor.

    Feed input with sink(), drain output with poll(), and call finish()
    once the input has ended, polling until it reports DONE.
    """

    def __init__(self, window_sz2, lookahead_sz2):
        validate_params(window_sz2, lookahead_sz2)
        self.window_sz2 = window_sz2
        self.lookahead_sz2 = lookahead_sz2
        self._input_buffer_size = 1 << window_sz2
        self._lookahead_size = 1 << lookahead_sz2
        self._buffer = bytearray(2 << window_sz2)
        self.reset()

    def reset(self):
        """Return the encoder to its freshly created state."""
        self._buffer[:] = bytes(len(self._buffer))
        self._index = []
        self._input_size = 0
        self._state = _State.NOT_FULL
        self._match_scan_index = 0
        self._finishing = False
        self._bit_index = 0x80
        self._current_byte = 0x00
        self._match_length = 0
        self._match_pos = 0
        self._outgoing_bits = 0
        self._outgoing_bits_count = 0

    def sink(self, data):
        """Copy as much of DATA as fits into the input buffer.

        Returns (SinkResult.OK, number of bytes taken). Raises MisuseError
        after finish(), or while earlier input still needs polling.
        """
        if self._finishing:
            raise MisuseError("cannot sink more input after finish()")
        if self._state is not _State.NOT_FULL:
            raise MisuseError("poll() must drain the encoder before sinking more")
        rem = self._input_buffer_size - self._input_size
        chunk = bytes(data[:rem])
        offset = self._input_buffer_size + self._input_size
        self._buffer[offset:offset + len(chunk)] = chunk
        self._input_size += len(chunk)
        if len(chunk) == rem:
            self._state = _State.FILLED
        return SinkResult.OK, len(chunk)

    def poll(self, out_size):
        """Produce at most OUT_SIZE bytes of compressed output.

        Returns (PollResult, bytes). MORE means the output limit was hit
        and another poll will give more.
        """
        if out_size <= 0:
            raise MisuseError("output size must be positive")
        out = bytearray()
        while True:
            in_state = self._state
            if in_state is _State.NOT_FULL:
                return PollResult.EMPTY, bytes(out)
            if in_state is _State.FILLED:
                self._index = build_index(
                    self._buffer, self._input_buffer_size + self._input_size
                )
                self._state = _State.SEARCH
            elif in_state is _State.SEARCH:
                self._state = self._step_search()
            elif in_state is _State.YIELD_TAG_BIT:
                self._state = self._yield_tag_bit(out, out_size)
            elif in_state is _State.YIELD_LITERAL:
                self._state = self._yield_literal(out, out_size)
            elif in_state is _State.YIELD_BR_INDEX:
                self._state = self._yield_br_index(out, out_size)
            elif in_state is _State.YIELD_BR_LENGTH:
                self._state = self._yield_br_length(out, out_size)
            elif in_state is _State.SAVE_BACKLOG:
                self._save_backlog()
                self._state = _State.NOT_FULL
            elif in_state is _State.FLUSH_BITS:
                self._state = self._flush_bit_buffer(out, out_size)
                return PollResult.EMPTY, bytes(out)
            else:
                return PollResult.EMPTY, bytes(out)

            if self._state is in_state and len(out) == out_size:
                return PollResult.MORE, bytes(out)

    def finish(self):
        """Mark the input as complete; DONE once all output has been polled."""
        self._finishing = True
        if self._state is _State.NOT_FULL:
            self._state = _State.FILLED
        return FinishResult.DONE if self._state is _State.DONE else FinishResult.MORE

    def _step_search(self):
        msi = self._match_scan_index
        fin = self._finishing
        if msi > self._input_size - (1 if fin else self._lookahead_size):
            return _State.FLUSH_BITS if fin else _State.SAVE_BACKLOG

        end = self._input_buffer_size + msi
        start = end - self._input_buffer_size
        max_possible = min(self._lookahead_size, self._input_size - msi)

        match = find_longest_match(
            self._buffer, self._index, start, end, max_possible,
            self.window_sz2, self.lookahead_sz2,
        )
        if match is None:
            self._match_scan_index += 1
            self._match_length = 0
        else:
            self._match_pos, self._match_length = match
        return _State.YIELD_TAG_BIT

    def _yield_tag_bit(self, out, out_size):
        if len(out) >= out_size:
            return _State.YIELD_TAG_BIT
        if self._match_length == 0:
            self._push_bits(1, LITERAL_MARKER, out)
            return _State.YIELD_LITERAL
        self._push_bits(1, BACKREF_MARKER, out)
        self._outgoing_bits = self._match_pos - 1
        self._outgoing_bits_count = self.window_sz2
        return _State.YIELD_BR_INDEX

    def _yield_literal(self, out, out_size):
        if len(out) >= out_size:
            return _State.YIELD_LITERAL
        pos = self._input_buffer_size + self._match_scan_index - 1
        self._push_bits(8, self._buffer[pos], out)
        return _State.SEARCH

    def _yield_br_index(self, out, out_size):
        if len(out) >= out_size:
            return _State.YIELD_BR_INDEX
        if self._push_outgoing_bits(out) > 0:
            return _State.YIELD_BR_INDEX
        self._outgoing_bits = self._match_length - 1
        self._outgoing_bits_count = self.lookahead_sz2
        return _State.YIELD_BR_LENGTH

    def _yield_br_length(self, out, out_size):
        if len(out) >= out_size:
            return _State.YIELD_BR_LENGTH
        if self._push_outgoing_bits(out) > 0:
            return _State.YIELD_BR_LENGTH
        self._match_scan_index += self._match_length
        self._match_length = 0
        return _State.SEARCH

    def _flush_bit_buffer(self, out, out_size):
        if self._bit_index == 0x80:
            return _State.DONE
        if len(out) < out_size:
            out.append(self._current_byte)
            return _State.DONE
        return _State.FLUSH_BITS

    def _push_outgoing_bits(self, out):
        if self._outgoing_bits_count > 8:
            count = 8
            bits = (self._outgoing_bits >> (self._outgoing_bits_count - 8)) & 0xFF
        else:
            count = self._outgoing_bits_count
            bits = self._outgoing_bits & 0xFF
        if count > 0:
            self._push_bits(count, bits, out)
            self._outgoing_bits_count -= count
        return count

    def _push_bits(self, count, bits, out):
        if count == 8 and self._bit_index == 0x80:
            out.append(bits & 0xFF)
            return
        for i in range(count - 1, -1, -1):
            if bits & (1 << i):
                self._current_byte |= self._bit_index
            self._bit_index >>= 1
            if self._bit_index == 0:
                self._bit_index = 0x80
                out.append(self._current_byte)
                self._current_byte = 0x00

    def _save_backlog(self):
        ibs = self._input_buffer_size
        msi = self._match_scan_index
        shift = 2 * ibs - msi
        self._buffer[0:shift] = self._buffer[msi:msi + shift]
        self._match_scan_index = 0
        self._input_size -= msi


def compress(data, window_sz2=11, lookahead_sz2=4):
    """Compress DATA in one call and return the compressed bytes."""
    encoder = Encoder(window_sz2, lookahead_sz2)
    view = memoryview(bytes(data))
    out = bytearray()
    poll_size = 4096

    def drain():
        while True:
            result, chunk = encoder.poll(poll_size)
            out.extend(chunk)
            if result is not PollResult.MORE:
                return

    sunk = 0
    while sunk < len(view):
        _, taken = encoder.sink(view[sunk:])
        sunk += taken
        drain()

    while encoder.finish() is FinishResult.MORE:
        drain()
    return bytes(out)