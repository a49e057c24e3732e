"""Back-reference search over the encoder's sliding window buffer."""


def _int16(value):
    """Wrap an integer to a signed 16-bit value."""
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


def build_index(data, end):
    """Return, for every position below END, the previous position holding
    the same byte, or a negative value when there is none.

    Positions are kept as signed 16-bit values, so in the largest window a
    position of 32768 or more reads as end-of-list.
    """
    last = [-1] * 256
    index = []
    for i, value in enumerate(data[:end]):
        index.append(last[value])
        last[value] = _int16(i)
    return index


def find_longest_match(data, index, start, end, maxlen, window_sz2, lookahead_sz2):
    """Find the longest earlier copy of data[end:end+maxlen] starting in
    data[start:end].

    Returns (distance, length) where distance counts back from END, or None
    when no match is long enough to be worth a back-reference.
    """
    needle = end
    best_len = 0
    best_pos = None
    start16 = _int16(start)
    pos = index[end]

    while pos - start16 >= 0:
        if data[pos + best_len] != data[needle + best_len]:
            pos = index[pos]
            continue
        length = 1
        while length < maxlen and data[pos + length] == data[needle + length]:
            length += 1
        if length > best_len:
            best_len = length
            best_pos = pos
            if length == maxlen:
                break
        pos = index[pos]

    break_even_point = 1 + window_sz2 + lookahead_sz2
    if best_pos is not None and best_len > break_even_point // 8:
        return end - best_pos, best_len
    return None