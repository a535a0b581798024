# main.py - Webcam runner for the face event analyzer
import argparse
import logging
import math
import time

import cv2

from analyzer_config import DEFAULT_CONFIG_PATH, load_config, save_config
from data_logger import DataLogger
from face_analyzer import FaceAnalyzer
from metrics.performance import PerformanceTracker
from vision.overlay import CoverFitProjection, OverlayTracker

STAR_COLOR = (0, 215, 255)
EYE_LINE_COLOR = (255, 255, 255)
MOUTH_LINE_COLOR = (80, 80, 255)
TEXT_COLOR = (200, 200, 200)
LINE_LENGTH = 15

logger = logging.getLogger(__name__)


def get_args(argv=None):
    p = argparse.ArgumentParser(description="Face event analyzer (webcam preview)")
    p.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="YAML configuration file")
    p.add_argument("--camera", type=int, default=0, help="Camera index for OpenCV")
    p.add_argument("--no-display", dest="display", action="store_false",
                   help="Run without the preview window")
    p.add_argument("--log-dir", default="logs", help="Directory for the daily event CSV")
    p.add_argument("--log-level", default="INFO",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    # Threshold overrides
    p.add_argument("--ear-thresh", type=float, default=None, help="Override eyes.ear_thresh")
    p.add_argument("--mar-thresh", type=float, default=None, help="Override mouth.mar_thresh")
    p.add_argument("--save-config", metavar="PATH",
                   help="Write the effective configuration as YAML and exit")
    return p.parse_args(argv)


def build_config(args):
    """
    Load the YAML configuration and apply command line overrides

    Args:
        args: Parsed command line arguments

    Returns:
        AnalyzerConfig: Effective configuration
    """
    config = load_config(args.config)
    overrides = {}
    if args.ear_thresh is not None:
        overrides["ear_threshold"] = args.ear_thresh
    if args.mar_thresh is not None:
        overrides["mar_threshold"] = args.mar_thresh
    return config.replace(**overrides) if overrides else config


class FaceEventSystem:
    """
    Wires the landmark source, analyzer, overlay and event log together
    Handles face loss: frames without a face are skipped and all state is
    reset when the face comes back.
    """

    def __init__(self, config, event_logger, landmark_source=None, performance_tracker=None):
        """
        Initialize the system

        Args:
            config: AnalyzerConfig
            event_logger: DataLogger receiving every event
            landmark_source: Object with process_frame(frame) -> landmarks or None
            performance_tracker: Optional PerformanceTracker shared by all stages
        """
        self.config = config
        self.event_logger = event_logger
        if landmark_source is None:
            from vision.face_mesh import FaceMeshSource
            landmark_source = FaceMeshSource()
        self.landmark_source = landmark_source
        self.performance = performance_tracker or PerformanceTracker()
        self.analyzer = FaceAnalyzer(self.handle_event, config, self.performance)
        self.overlay = OverlayTracker(config.anchor_window)

        self.frame_count = 0
        self.event_count = 0
        self.face_present = False

    def handle_event(self, event):
        self.event_count += 1
        self.event_logger.log_face_event(event)
        self.overlay.handle_event(event)

    def reset(self):
        self.analyzer.reset()
        self.overlay.reset()

    def process_frame(self, frame):
        """
        Run one camera frame through detection, analysis and overlay geometry

        Args:
            frame: Input camera frame (BGR)

        Returns:
            bool: Whether a face was found
        """
        self.frame_count += 1
        self.performance.start_frame()

        self.performance.start_stage("detection")
        landmarks = self.landmark_source.process_frame(frame)
        self.performance.end_stage("detection")
        self.overlay.expire()

        if landmarks is None or len(landmarks) == 0:
            if self.face_present:
                logger.info("Face lost")
            self.face_present = False
            return False

        if not self.face_present:
            # Face reacquired: start from a clean state
            self.reset()
            self.face_present = True

        height, width = frame.shape[:2]
        projection = CoverFitProjection((0, 0, width, height), (width, height), mirrored=True)
        self.overlay.push_landmarks(landmarks, projection)

        # Events spawn lines from the geometry pushed above
        self.analyzer.analyze_face(landmarks)
        return True

    def draw_overlay(self, display_frame):
        """
        Draw stars, live lines and current ratios on the mirrored preview

        Args:
            display_frame: Mirrored frame to draw on
        """
        self.performance.start_stage("drawing")

        if self.face_present:
            for star in self.overlay.stars:
                center = (int(star.position.x), int(star.position.y))
                cv2.drawMarker(display_frame, center, STAR_COLOR, cv2.MARKER_STAR, 14, 2)

        for line in self.overlay.lines:
            color = EYE_LINE_COLOR if line.role.value.endswith("Eye") else MOUTH_LINE_COLOR
            start = (int(line.position.x), int(line.position.y))
            end = (
                int(line.position.x + LINE_LENGTH * math.cos(math.radians(line.angle))),
                int(line.position.y + LINE_LENGTH * math.sin(math.radians(line.angle))),
            )
            cv2.line(display_frame, start, end, color, 2)

        ratios = self.analyzer.get_current_ratios()
        htr = self.analyzer.get_current_htr()['htr_average']
        hpr = self.analyzer.get_current_hpr()['hpr_average']
        fps = self.performance.get_metrics()['fps']
        text = (f"EAR L {ratios['left_ear']:.3f} R {ratios['right_ear']:.3f} | "
                f"MAR {ratios['mouth_mar']:.3f} | HTR {htr:+.2f} HPR {hpr:+.2f} | FPS {fps:.0f}")
        cv2.putText(display_frame, text, (10, 25), cv2.FONT_HERSHEY_SIMPLEX, 0.5, TEXT_COLOR, 1)

        self.performance.end_stage("drawing")

    def cleanup(self):
        self.landmark_source.cleanup()


def main(argv=None):
    """
    Main function to run the face event analyzer
    """
    args = get_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    config = build_config(args)
    if args.save_config:
        save_config(config, args.save_config)
        print(f"Configuration written to {args.save_config}")
        return

    system = FaceEventSystem(config, DataLogger(args.log_dir))

    cap = cv2.VideoCapture(args.camera)
    actual_width = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
    actual_height = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))

    print("Starting Face Event Analyzer")
    print(f"Camera: {actual_width}x{actual_height}")
    print(f"Configuration: {args.config}")
    print("\nControls:")
    print("  'q' - Quit application")
    print("  'r' - Reset analyzer state")

    start_time = time.time()

    try:
        while True:
            ret, frame = cap.read()
            if not ret:
                print("Failed to capture frame from camera")
                break

            system.process_frame(frame)

            if not args.display:
                continue

            display_frame = cv2.flip(frame, 1)
            system.draw_overlay(display_frame)
            cv2.imshow('Face Event Analyzer', display_frame)

            key = cv2.waitKey(1) & 0xFF
            if key == ord('q'):
                break
            elif key == ord('r'):
                system.reset()
                print("Analyzer reset!")

    except KeyboardInterrupt:
        print("System interrupted by user")
    finally:
        cap.release()
        cv2.destroyAllWindows()
        system.cleanup()

        total_time = time.time() - start_time
        print(f"\nSystem Statistics:")
        print(f"  Total runtime: {total_time:.1f} seconds")
        print(f"  Frames processed: {system.frame_count}")
        if total_time > 0:
            print(f"  Average FPS: {system.frame_count / total_time:.1f}")
        print(f"  Events emitted: {system.event_count}")
        print("System shutdown complete")


if __name__ == "__main__":
    main()
