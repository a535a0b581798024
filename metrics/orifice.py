# metrics/orifice.py
import logging

from metrics.events import EventKind
from metrics.filters import MedianFilter

logger = logging.getLogger(__name__)

MOUTH_GATING_MODES = ("symmetric", "close_only", "none")


class OrificeState:
    """
    Two-state (open/closed) machine for an eye or the mouth
    Opening/closing flags are derived from the last two states, never stored.
    """

    def __init__(self, is_open, previously_open=None):
        self.is_open = is_open
        self.previously_open = is_open if previously_open is None else previously_open

    @property
    def is_opening(self):
        return self.is_open and not self.previously_open

    @property
    def is_closing(self):
        return not self.is_open and self.previously_open

    def update(self, is_currently_open):
        """Shift the current state into previous and store the new one"""
        self.previously_open = self.is_open
        self.is_open = is_currently_open


class OrificeTracker:
    """
    Smoothing, velocity and transition gating for one orifice
    - Raw ratio is median filtered
    - Velocity is the finite difference of consecutive filtered values,
      itself median filtered
    - A transition fires only when its edge is not gated, or when the
      velocity median exceeds the velocity threshold
    """

    def __init__(self, name, threshold, velocity_threshold, value_window,
                 velocity_window, default_open, gate_open, gate_close):
        """
        Initialize the tracker

        Args:
            name: Label used in log messages (leftEye, rightEye, mouth)
            threshold: Filtered ratio above which the orifice counts as open
            velocity_threshold: Minimum |velocity median| for a gated edge
            value_window: Median window for the ratio
            velocity_window: Median window for the velocity
            default_open: State after construction and reset
            gate_open: Whether the opening edge needs velocity
            gate_close: Whether the closing edge needs velocity
        """
        self.name = name
        self.threshold = threshold
        self.velocity_threshold = velocity_threshold
        self.default_open = default_open
        self.gate_open = gate_open
        self.gate_close = gate_close

        self.value_filter = MedianFilter(value_window)
        self.velocity_filter = MedianFilter(velocity_window)
        self.state = OrificeState(default_open)
        self.previous_value = None
        self.current_value = 0.0

    @classmethod
    def for_eye(cls, name, threshold, velocity_threshold, value_window, velocity_window):
        # Close edge needs velocity, open edge always fires
        return cls(name, threshold, velocity_threshold, value_window, velocity_window,
                   default_open=True, gate_open=False, gate_close=True)

    @classmethod
    def for_mouth(cls, name, threshold, velocity_threshold, value_window,
                  velocity_window, gating="symmetric"):
        if gating not in MOUTH_GATING_MODES:
            raise ValueError(f"Unknown mouth gating mode: {gating!r}")
        return cls(name, threshold, velocity_threshold, value_window, velocity_window,
                   default_open=False,
                   gate_open=gating == "symmetric",
                   gate_close=gating in ("symmetric", "close_only"))

    def _passes_gate(self, gated):
        if not gated:
            return True
        return abs(self.velocity_filter.get_median()) > self.velocity_threshold

    def update(self, raw_value):
        """
        Feed one frame's raw ratio

        Args:
            raw_value: Unfiltered EAR or MAR for this frame

        Returns:
            EventKind or None: OPEN/CLOSE when a transition fires
        """
        self.value_filter.add_value(raw_value)
        value = self.value_filter.get_median()

        if self.previous_value is not None:
            self.velocity_filter.add_value(value - self.previous_value)
        self.previous_value = value
        self.current_value = value

        self.state.update(value > self.threshold)

        if self.state.is_closing and self._passes_gate(self.gate_close):
            return EventKind.CLOSE
        if self.state.is_opening and self._passes_gate(self.gate_open):
            return EventKind.OPEN
        if self.state.is_closing or self.state.is_opening:
            logger.debug("%s transition suppressed (velocity %.4f)",
                         self.name, self.velocity_filter.get_median())
        return None

    def get_velocity(self):
        return self.velocity_filter.get_median()

    def get_velocity_count(self):
        return self.velocity_filter.get_count()

    def reset(self):
        """Return to the default state and clear both filters"""
        self.state = OrificeState(self.default_open)
        self.value_filter.reset()
        self.velocity_filter.reset()
        self.previous_value = None
        self.current_value = 0.0
