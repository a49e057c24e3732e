"""Streaming LZSS decoder with a sink/poll/finish interface."""

from enum import Enum, IntEnum

from .common import validate_params

_MAX_INPUT_BUFFER_SIZE = 0xFFFF


class DecoderSinkResult(Enum):
    """Outcome of feeding compressed input into the decoder."""

    OK = 0
    FULL = 1


class DecoderPollResult(Enum):
    """Outcome of asking the decoder for output."""

    EMPTY = 0
    MORE = 1


class DecoderFinishResult(Enum):
    """Outcome of telling the decoder the input has ended."""

    DONE = 0
    MORE = 1


class _State(IntEnum):
    TAG_BIT = 0
    YIELD_LITERAL = 1
    BACKREF_INDEX_MSB = 2
    BACKREF_INDEX_LSB = 3
    BACKREF_COUNT_MSB = 4
    BACKREF_COUNT_LSB = 5
    YIELD_BACKREF = 6


class Decoder:
    """Incremental decompressor.

    Feed compressed input with sink(), drain output with poll(), and call
    finish() once the input has ended, polling until it reports DONE. The
    window and lookahead sizes must match those used for compression.
    """

    def __init__(self, input_buffer_size, window_sz2, lookahead_sz2):
        validate_params(window_sz2, lookahead_sz2)
        if not 1 <= input_buffer_size <= _MAX_INPUT_BUFFER_SIZE:
            raise ValueError(
                f"input_buffer_size must be between 1 and "
                f"{_MAX_INPUT_BUFFER_SIZE}, got {input_buffer_size}"
            )
        self.input_buffer_size = input_buffer_size
        self.window_sz2 = window_sz2
        self.lookahead_sz2 = lookahead_sz2
        self._input = bytearray(input_buffer_size)
        self._window = bytearray(1 << window_sz2)
        self._mask = (1 << window_sz2) - 1
        self.reset()

    def reset(self):
        """Return the decoder to its freshly created state."""
        self._input[:] = bytes(len(self._input))
        self._window[:] = bytes(len(self._window))
        self._state = _State.TAG_BIT
        self._input_size = 0
        self._input_index = 0
        self._bit_index = 0x00
        self._current_byte = 0x00
        self._output_count = 0
        self._output_index = 0
        self._head_index = 0

    def sink(self, data):
        """Copy as much of DATA as fits into the input buffer.

        Returns (DecoderSinkResult, number of bytes taken); FULL with zero
        bytes when the buffer has no room left.
        """
        rem = self.input_buffer_size - self._input_size
        if rem == 0:
            return DecoderSinkResult.FULL, 0
        chunk = bytes(data[:rem])
        self._input[self._input_size:self._input_size + len(chunk)] = chunk
        self._input_size += len(chunk)
        return DecoderSinkResult.OK, len(chunk)

    def poll(self, out_size):
        """Produce at most OUT_SIZE bytes of decompressed output.

        Returns (DecoderPollResult, bytes). MORE means the output limit was
        hit and another poll will give more.
        """
        if out_size < 0:
            raise ValueError("output size must not be negative")
        out = bytearray()
        while True:
            in_state = self._state
            if in_state is _State.TAG_BIT:
                self._state = self._st_tag_bit()
            elif in_state is _State.YIELD_LITERAL:
                self._state = self._st_yield_literal(out, out_size)
            elif in_state is _State.BACKREF_INDEX_MSB:
                self._state = self._st_backref_index_msb()
            elif in_state is _State.BACKREF_INDEX_LSB:
                self._state = self._st_backref_index_lsb()
            elif in_state is _State.BACKREF_COUNT_MSB:
                self._state = self._st_backref_count_msb()
            elif in_state is _State.BACKREF_COUNT_LSB:
                self._state = self._st_backref_count_lsb()
            else:
                self._state = self._st_yield_backref(out, out_size)

            if self._state is in_state:
                if len(out) == out_size:
                    return DecoderPollResult.MORE, bytes(out)
                return DecoderPollResult.EMPTY, bytes(out)

    def finish(self):
        """Report whether all output has been produced from the input given."""
        if self._state is _State.YIELD_BACKREF:
            return DecoderFinishResult.MORE
        if self._input_size == 0:
            return DecoderFinishResult.DONE
        return DecoderFinishResult.MORE

    def _st_tag_bit(self):
        bits = self._get_bits(1)
        if bits is None:
            return _State.TAG_BIT
        if bits:
            return _State.YIELD_LITERAL
        if self.window_sz2 > 8:
            return _State.BACKREF_INDEX_MSB
        self._output_index = 0
        return _State.BACKREF_INDEX_LSB

    def _st_yield_literal(self, out, out_size):
        if len(out) >= out_size:
            return _State.YIELD_LITERAL
        byte = self._get_bits(8)
        if byte is None:
            return _State.YIELD_LITERAL
        self._window[self._head_index & self._mask] = byte
        self._head_index = (self._head_index + 1) & 0xFFFF
        out.append(byte)
        return _State.TAG_BIT

    def _st_backref_index_msb(self):
        bits = self._get_bits(self.window_sz2 - 8)
        if bits is None:
            return _State.BACKREF_INDEX_MSB
        self._output_index = (bits << 8) & 0xFFFF
        return _State.BACKREF_INDEX_LSB

    def _st_backref_index_lsb(self):
        bits = self._get_bits(min(self.window_sz2, 8))
        if bits is None:
            return _State.BACKREF_INDEX_LSB
        self._output_index = ((self._output_index | bits) + 1) & 0xFFFF
        self._output_count = 0
        if self.lookahead_sz2 > 8:
            return _State.BACKREF_COUNT_MSB
        return _State.BACKREF_COUNT_LSB

    def _st_backref_count_msb(self):
        bits = self._get_bits(self.lookahead_sz2 - 8)
        if bits is None:
            return _State.BACKREF_COUNT_MSB
        self._output_count = (bits << 8) & 0xFFFF
        return _State.BACKREF_COUNT_LSB

    def _st_backref_count_lsb(self):
        bits = self._get_bits(min(self.lookahead_sz2, 8))
        if bits is None:
            return _State.BACKREF_COUNT_LSB
        self._output_count = ((self._output_count | bits) + 1) & 0xFFFF
        return _State.YIELD_BACKREF

    def _st_yield_backref(self, out, out_size):
        count = out_size - len(out)
        if count > 0:
            count = min(count, self._output_count)
            window = self._window
            mask = self._mask
            neg_offset = self._output_index
            for _ in range(count):
                c = window[(self._head_index - neg_offset) & mask]
                out.append(c)
                window[self._head_index & mask] = c
                self._head_index = (self._head_index + 1) & 0xFFFF
            self._output_count -= count
            if self._output_count == 0:
                return _State.TAG_BIT
        return _State.YIELD_BACKREF

    def _get_bits(self, count):
        """Take COUNT bits from the input, or None if they are not all there."""
        if count > 15:
            return None
        if self._input_size == 0 and self._bit_index < (1 << (count - 1)):
            return None
        accumulator = 0
        for _ in range(count):
            if self._bit_index == 0:
                if self._input_size == 0:
                    return None
                self._current_byte = self._input[self._input_index]
                self._input_index += 1
                if self._input_index == self._input_size:
                    self._input_index = 0
                    self._input_size = 0
                self._bit_index = 0x80
            accumulator <<= 1
            if self._current_byte & self._bit_index:
                accumulator |= 1
            self._bit_index >>= 1
        return accumulator


def decompress(data, window_sz2=11, lookahead_sz2=4, input_buffer_size=256):
    """Decompress DATA in one call and return the original bytes."""
    decoder = Decoder(input_buffer_size, window_sz2, lookahead_sz2)
    view = memoryview(bytes(data))
    out = bytearray()
    poll_size = 4096

    def drain():
        while True:
            result, chunk = decoder.poll(poll_size)
            out.extend(chunk)
            if result is not DecoderPollResult.MORE:
                return

    sunk = 0
    while sunk < len(view):
        _, taken = decoder.sink(view[sunk:])
        sunk += taken
        drain()

    while decoder.finish() is DecoderFinishResult.MORE:
        drain()
    return bytes(out)