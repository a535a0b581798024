# data_logger.py
import csv
import logging
import os
from datetime import datetime

logger = logging.getLogger(__name__)


class DataLogger:
    """
    Logs face events to a daily CSV file with timestamps.
    Creates a new log file each day under the log directory.
    """

    def __init__(self, log_dir="logs", now=None):
        """
        Initialize the logger and ensure the log directory exists.

        Args:
            log_dir: Directory holding the daily CSV files
            now: Callable returning the current datetime (defaults to datetime.now)
        """
        self.log_dir = log_dir
        self.now = now or datetime.now
        os.makedirs(self.log_dir, exist_ok=True)
        self.current_date = None
        self.file_path = None
        self._update_log_file()

    def _update_log_file(self):
        """
        Create or switch to a new log file when the date changes.
        """
        today = self.now().strftime("%Y-%m-%d")
        if today != self.current_date:
            self.current_date = today
            self.file_path = os.path.join(self.log_dir, f"{today}_events.csv")

            # Initialize CSV file with headers if it's new
            if not os.path.exists(self.file_path):
                with open(self.file_path, mode="w", newline="") as file:
                    writer = csv.writer(file)
                    writer.writerow(["Timestamp", "Event Type", "Details"])

    def log_event(self, event_type, details=""):
        """
        Log an event with the current timestamp.
        """
        self._update_log_file()
        timestamp = self.now().strftime("%Y-%m-%d %H:%M:%S")
        with open(self.file_path, mode="a", newline="") as file:
            writer = csv.writer(file)
            writer.writerow([timestamp, event_type, details])

        logger.info("%s - %s: %s", timestamp, event_type, details)

    def log_face_event(self, event, details=""):
        """
        Log an analyzer event as "<bodyPart> <kind>", e.g. "leftEye close".
        """
        body_part, kind = event.as_pair()
        self.log_event(f"{body_part} {kind}", details)
