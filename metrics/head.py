# metrics/head.py
from metrics.events import HeadPitched, HeadTurned, PitchDirection, TurnDirection
from metrics.filters import RollingAverage


class OrientationTracker:
    """
    Three-bucket classifier over a rolling average of one head ratio
    - average > +threshold  -> positive bucket
    - average < -threshold  -> negative bucket
    - otherwise             -> center
    A bucket change fires only when the new bucket is not center. Passing
    through center re-arms the next side event.
    """

    def __init__(self, threshold, window_size, positive, negative, center):
        self.threshold = threshold
        self.average = RollingAverage(window_size)
        self.positive = positive
        self.negative = negative
        self.center = center
        self.current = center

    def classify(self, value):
        if value > self.threshold:
            return self.positive
        if value < -self.threshold:
            return self.negative
        return self.center

    def update(self, raw_value):
        """
        Feed one frame's raw ratio

        Args:
            raw_value: HTR or HPR for this frame

        Returns:
            The new bucket if it changed to a non-center bucket, else None
        """
        self.average.add_value(raw_value)
        bucket = self.classify(self.average.get_average())

        changed = bucket != self.current and bucket != self.center
        self.current = bucket
        return bucket if changed else None

    def reset(self):
        self.average.reset()
        self.current = self.center


class HeadOrientationTracker:
    """
    Head turn (left/right) and pitch (up/down) trackers for one face
    """

    def __init__(self, htr_threshold, htr_window, hpr_threshold, hpr_window):
        """
        Initialize both trackers

        Args:
            htr_threshold: Absolute HTR average needed to count as turned
            htr_window: Rolling-average window for HTR
            hpr_threshold: Absolute HPR average needed to count as pitched
            hpr_window: Rolling-average window for HPR
        """
        self.turn = OrientationTracker(
            htr_threshold, htr_window,
            positive=TurnDirection.LEFT,
            negative=TurnDirection.RIGHT,
            center=TurnDirection.CENTER,
        )
        self.pitch = OrientationTracker(
            hpr_threshold, hpr_window,
            positive=PitchDirection.UP,
            negative=PitchDirection.DOWN,
            center=PitchDirection.CENTER,
        )

    def update_turn(self, htr):
        """Returns a HeadTurned event or None"""
        direction = self.turn.update(htr)
        return HeadTurned(direction) if direction is not None else None

    def update_pitch(self, hpr):
        """Returns a HeadPitched event or None"""
        direction = self.pitch.update(hpr)
        return HeadPitched(direction) if direction is not None else None

    @property
    def position(self):
        return self.turn.current

    @property
    def pitch_position(self):
        return self.pitch.current

    def reset(self):
        """Clear both rolling averages and go back to center"""
        self.turn.reset()
        self.pitch.reset()
