# metrics/filters.py
from collections import deque

import numpy as np


class MedianFilter:
    """
    Sliding-window median filter for noisy scalar signals
    - Keeps the most recent `window_size` samples (FIFO)
    - Median of an even-length window is the mean of the two middle samples
    - Empty window reads as 0
    """

    def __init__(self, window_size):
        """
        Initialize the filter

        Args:
            window_size: Maximum number of samples kept in the window
        """
        if window_size <= 0:
            raise ValueError("Window size must be positive")
        self.window_size = window_size
        self.values = deque(maxlen=window_size)

    def add_value(self, value):
        """Append a sample, evicting the oldest one once the window is full"""
        self.values.append(float(value))

    def get_median(self):
        """
        Median of the current window

        Returns:
            float: Median value, or 0 if no samples have been added
        """
        if not self.values:
            return 0.0
        return float(np.median(self.values))

    def get_count(self):
        return len(self.values)

    def is_full(self):
        return len(self.values) >= self.window_size

    def reset(self):
        """Clear all stored samples"""
        self.values.clear()


class RollingAverage:
    """
    Sliding-window mean with a running sum
    Same FIFO discipline as MedianFilter; average is O(1) per read.
    """

    def __init__(self, window_size):
        if window_size <= 0:
            raise ValueError("Window size must be positive")
        self.window_size = window_size
        self.values = deque()
        self.total = 0.0

    def add_value(self, value):
        """
        Add a sample to the window

        Args:
            value: New sample
        """
        value = float(value)
        self.values.append(value)
        self.total += value
        if len(self.values) > self.window_size:
            self.total -= self.values.popleft()

    def get_average(self):
        """
        Mean of the current window

        Returns:
            float: Average, or 0 if the window is empty
        """
        if not self.values:
            return 0.0
        return self.total / len(self.values)

    def get_count(self):
        return len(self.values)

    def is_full(self):
        return len(self.values) >= self.window_size

    def reset(self):
        """Clear the window and the running sum"""
        self.values.clear()
        self.total = 0.0
