from hypothesis import given, settings
from hypothesis import strategies as st

from hshrink.match import build_index, find_longest_match


def _window_buffer(window_sz2, payload):
    size = 1 << window_sz2
    buf = bytearray(2 * size)
    buf[size:size + len(payload)] = payload
    return buf


def _search(window_sz2, lookahead_sz2, payload, msi):
    size = 1 << window_sz2
    buf = _window_buffer(window_sz2, payload)
    end = size + len(payload)
    index = build_index(buf, end)
    maxlen = min(1 << lookahead_sz2, len(payload) - msi)
    return find_longest_match(buf, index, msi, size + msi, maxlen,
                              window_sz2, lookahead_sz2)


def test_index_has_one_entry_per_position():
    data = b"abracadabra"
    assert len(build_index(data, len(data))) == len(data)


def test_index_points_to_previous_equal_byte():
    data = b"abracadabra"
    index = build_index(data, len(data))
    for i, prev in enumerate(index):
        if prev < 0:
            assert data[i] not in data[:i]
        else:
            assert data[prev] == data[i]
            assert data[i] not in data[prev + 1:i]


def test_index_first_occurrences_are_end_of_list():
    data = b"xyz"
    assert all(prev < 0 for prev in build_index(data, 3))


def test_repeated_substring_found():
    assert _search(8, 3, b"abcdabcd", 4) == (4, 4)


def test_no_match_at_start_of_input():
    assert _search(8, 3, b"abcdabcd", 0) is None


def test_self_overlapping_run():
    assert _search(8, 7, b"aaaaa", 1) == (1, 4)


def test_short_match_below_break_even_rejected():
    assert _search(8, 3, b"abac", 2) is None


def test_match_limited_by_maxlen():
    result = _search(8, 3, b"ab" * 20, 2)
    assert result is not None
    assert result[1] == 8


@settings(max_examples=100)
@given(st.binary(min_size=1, max_size=200), st.data())
def test_match_is_a_real_copy(payload, draw):
    window_sz2, lookahead_sz2 = 8, 4
    msi = draw.draw(st.integers(min_value=0, max_value=len(payload) - 1))
    size = 1 << window_sz2
    buf = _window_buffer(window_sz2, payload)
    end = size + msi
    index = build_index(buf, size + len(payload))
    maxlen = min(1 << lookahead_sz2, len(payload) - msi)
    result = find_longest_match(buf, index, msi, end, maxlen,
                                window_sz2, lookahead_sz2)
    if result is not None:
        distance, length = result
        assert 1 <= distance <= size
        assert 1 < length <= maxlen
        src = end - distance
        assert buf[src:src + length] == buf[end:end + length]