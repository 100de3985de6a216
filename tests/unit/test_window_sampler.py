"""Unit tests for ByteWindowSampler."""

import pytest

from partialsum.domain.errors import InvalidWindow
from partialsum.domain.models.sample_window import SampleWindow
from partialsum.domain.services.window_sampler import ByteWindowSampler


def test_small_file_is_one_whole_window():
    """Files no larger than the window are hashed in full."""
    assert ByteWindowSampler.sample(50, 100) == [SampleWindow(0, 50)]
    assert ByteWindowSampler.sample(100, 100) == [SampleWindow(0, 100)]


def test_empty_file_is_one_empty_window():
    assert ByteWindowSampler.sample(0, 100) == [SampleWindow(0, 0)]


def test_two_windows_up_to_twice_the_window():
    """Between W and 2W only start and end are sampled."""
    assert ByteWindowSampler.sample(150, 100) == [SampleWindow(0, 100), SampleWindow(50, 100)]
    assert ByteWindowSampler.sample(200, 100) == [SampleWindow(0, 100), SampleWindow(100, 100)]
    assert ByteWindowSampler.sample(101, 100) == [SampleWindow(0, 100), SampleWindow(1, 100)]


def test_three_windows_in_general_case():
    windows = ByteWindowSampler.sample(1000, 100)
    assert windows == [SampleWindow(0, 100), SampleWindow(450, 100), SampleWindow(900, 100)]


def test_middle_window_uses_floor():
    windows = ByteWindowSampler.sample(201, 100)
    assert windows[1] == SampleWindow(50, 100)
    windows = ByteWindowSampler.sample(502, 100)
    assert windows[1] == SampleWindow(201, 100)


@pytest.mark.parametrize("size", [0, 1, 99, 100, 101, 199, 200, 201, 299, 300, 301, 4096, 10**12])
@pytest.mark.parametrize("window_len", [1, 7, 100, 4096])
def test_windows_never_pass_end_of_file(size, window_len):
    windows = ByteWindowSampler.sample(size, window_len)
    assert 1 <= len(windows) <= 3
    for window in windows:
        assert window.offset + window.length <= size
        assert window.length <= window_len
    # start/middle/end order
    offsets = [w.offset for w in windows]
    assert offsets == sorted(offsets)


def test_zero_window_is_invalid():
    with pytest.raises(InvalidWindow) as exc_info:
        ByteWindowSampler.sample(1000, 0)
    assert exc_info.value.window_len == 0


def test_negative_window_is_invalid():
    with pytest.raises(InvalidWindow):
        ByteWindowSampler.sample(1000, -5)


def test_negative_size_rejected():
    with pytest.raises(ValueError, match="file_size"):
        ByteWindowSampler.sample(-1, 100)


def test_sample_window_overlap():
    assert SampleWindow(0, 100).overlaps(SampleWindow(50, 100))
    assert not SampleWindow(0, 100).overlaps(SampleWindow(100, 100))
    assert SampleWindow(10, 5).end == 15


def test_sample_window_rejects_negative_fields():
    with pytest.raises(ValueError):
        SampleWindow(-1, 10)
    with pytest.raises(ValueError):
        SampleWindow(0, -1)
