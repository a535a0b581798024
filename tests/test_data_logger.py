"""Tests for data_logger."""

import csv
from datetime import datetime

from data_logger import DataLogger
from metrics.events import EyeClosed, HeadTurned, Side, TurnDirection


class MutableNow:

    def __init__(self, value):
        self.value = value

    def __call__(self):
        return self.value


def read_rows(path):
    with open(path, newline="") as file:
        return list(csv.reader(file))


class TestDataLogger:

    def test_creates_daily_file_with_header(self, tmp_path):
        now = MutableNow(datetime(2024, 3, 5, 9, 30, 0))
        logger = DataLogger(str(tmp_path / "logs"), now=now)
        assert logger.file_path.endswith("2024-03-05_events.csv")
        assert read_rows(logger.file_path) == [["Timestamp", "Event Type", "Details"]]

    def test_log_face_event(self, tmp_path):
        now = MutableNow(datetime(2024, 3, 5, 9, 30, 0))
        logger = DataLogger(str(tmp_path), now=now)
        logger.log_face_event(EyeClosed(Side.LEFT))
        logger.log_face_event(HeadTurned(TurnDirection.RIGHT), details="avg=-0.45")
        assert read_rows(logger.file_path)[1:] == [
            ["2024-03-05 09:30:00", "leftEye close", ""],
            ["2024-03-05 09:30:00", "head right", "avg=-0.45"],
        ]

    def test_rolls_over_at_midnight(self, tmp_path):
        now = MutableNow(datetime(2024, 3, 5, 23, 59, 59))
        logger = DataLogger(str(tmp_path), now=now)
        first = logger.file_path
        now.value = datetime(2024, 3, 6, 0, 0, 1)
        logger.log_event("mouth open")
        assert logger.file_path != first
        assert read_rows(logger.file_path)[-1] == ["2024-03-06 00:00:01", "mouth open", ""]
        assert len(read_rows(first)) == 1

    def test_appends_to_existing_file(self, tmp_path):
        now = MutableNow(datetime(2024, 3, 5, 12, 0, 0))
        DataLogger(str(tmp_path), now=now).log_event("mouth open")
        logger = DataLogger(str(tmp_path), now=now)
        logger.log_event("mouth close")
        assert [row[1] for row in read_rows(logger.file_path)] == [
            "Event Type", "mouth open", "mouth close"]
