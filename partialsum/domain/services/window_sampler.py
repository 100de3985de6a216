"""Domain service choosing which byte ranges of a file are hashed."""

from __future__ import annotations

from ..errors import InvalidWindow
from ..models.sample_window import SampleWindow


class ByteWindowSampler:
    """
    Compute start/middle/end sample windows for a file size.

    This service is pure (no I/O) and deterministic.
    """

    @staticmethod
    def sample(file_size: int, window_len: int) -> list[SampleWindow]:
        """
        Return the windows to read, in start/middle/end order.

        - ``file_size <= window_len``: the whole file as one window
        - ``file_size <= 2 * window_len``: start and end only
        - otherwise: start, middle and end

        Args:
            file_size: File size in bytes
            window_len: Bytes per window

        Returns:
            Windows with ``offset + length <= file_size``

        Raises:
            InvalidWindow: If window_len is not positive
        """
        if window_len <= 0:
            raise InvalidWindow(window_len)
        if file_size < 0:
            raise ValueError(f"file_size must be >= 0, got {file_size}")

        if file_size <= window_len:
            return [SampleWindow(0, file_size)]

        start = SampleWindow(0, window_len)
        end = SampleWindow(file_size - window_len, window_len)

        if file_size <= 2 * window_len:
            # Any middle window starts before offset window_len and overlaps start
            return [start, end]

        middle = SampleWindow((file_size - window_len) // 2, window_len)
        return [start, middle, end]
