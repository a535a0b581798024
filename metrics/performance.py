# metrics/performance.py
import time

from metrics.filters import RollingAverage

STAGES = ("detection", "analysis", "drawing")


class PerformanceTracker:
    """
    Per-stage timing and frame rate over a rolling window
    - Stage durations are reported in milliseconds
    - FPS is derived from the interval between consecutive start_frame calls
    Passed explicitly to whoever needs it; there is no shared instance.
    """

    def __init__(self, window_size=30, clock=None):
        """
        Initialize the tracker

        Args:
            window_size: Number of samples averaged per metric
            clock: Callable returning seconds (defaults to time.perf_counter)
        """
        self.clock = clock or time.perf_counter
        self.stage_averages = {stage: RollingAverage(window_size) for stage in STAGES}
        self.fps_average = RollingAverage(window_size)
        self.timers = {}
        self.last_frame_start = None

    def start_frame(self):
        now = self.clock()
        if self.last_frame_start is not None:
            delta = now - self.last_frame_start
            if delta > 0:
                self.fps_average.add_value(1.0 / delta)
        self.last_frame_start = now

    def start_stage(self, stage):
        if stage not in self.stage_averages:
            raise ValueError(f"Unknown stage: {stage!r}")
        self.timers[stage] = self.clock()

    def end_stage(self, stage):
        """Close a stage; ignored when the stage was never started"""
        start = self.timers.pop(stage, None)
        if start is None:
            return
        self.stage_averages[stage].add_value((self.clock() - start) * 1000.0)

    def get_metrics(self):
        """
        Current rolling averages

        Returns:
            dict: detection/analysis/drawing in ms and fps
        """
        metrics = {stage: avg.get_average() for stage, avg in self.stage_averages.items()}
        metrics['fps'] = self.fps_average.get_average()
        return metrics

    def clear(self):
        for avg in self.stage_averages.values():
            avg.reset()
        self.fps_average.reset()
        self.timers.clear()
        self.last_frame_start = None
