import pytest

from hshrink.common import (
    MAX_WINDOW_BITS,
    MIN_LOOKAHEAD_BITS,
    MIN_WINDOW_BITS,
    validate_params,
)


@pytest.mark.parametrize(
    "window, lookahead",
    [
        (MIN_WINDOW_BITS - 1, 8),
        (MAX_WINDOW_BITS + 1, 8),
        (8, MIN_LOOKAHEAD_BITS - 1),
        (8, 9),
        (MIN_WINDOW_BITS, MIN_WINDOW_BITS),
        (MIN_WINDOW_BITS, MIN_WINDOW_BITS + 1),
    ],
)
def test_rejects_invalid_parameters(window, lookahead):
    with pytest.raises(ValueError):
        validate_params(window, lookahead)


@pytest.mark.parametrize(
    "window, lookahead",
    [(8, 7), (8, 3), (7, 6), (11, 4), (MAX_WINDOW_BITS, 14), (MIN_WINDOW_BITS, 3)],
)
def test_accepts_valid_parameters(window, lookahead):
    assert validate_params(window, lookahead) is None


def test_error_message_names_window():
    with pytest.raises(ValueError, match="window_sz2"):
        validate_params(MAX_WINDOW_BITS + 1, 4)


def test_error_message_names_lookahead():
    with pytest.raises(ValueError, match="lookahead_sz2"):
        validate_params(8, MIN_LOOKAHEAD_BITS - 1)