# face_analyzer.py - Per-frame facial event detection
import logging

from analyzer_config import AnalyzerConfig
from metrics.events import (
    EventKind,
    EyeClosed,
    EyeOpened,
    MouthClosed,
    MouthOpened,
    Side,
)
from metrics.head import HeadOrientationTracker
from metrics.orifice import OrificeTracker
from vision.geometry import calculate_ear, calculate_hpr, calculate_htr, calculate_mar
from vision.landmarks import (
    CHIN_CENTER,
    FOREHEAD_TOP,
    LEFT_EYE_LANDMARKS,
    LEFT_FACE_SIDE,
    MOUTH_LANDMARKS,
    NOSE_CENTER,
    RIGHT_EYE_LANDMARKS,
    RIGHT_FACE_SIDE,
    as_landmarks,
    extract_points,
)

logger = logging.getLogger(__name__)


class FaceAnalyzer:
    """
    Turns one tracked face's landmark stream into discrete events
    - Blinks per eye (velocity-gated close, unconditional open)
    - Mouth open/close (velocity gating per config)
    - Head turn left/right and pitch up/down
    Owns every filter and state object for the face; nothing else mutates them.
    """

    def __init__(self, on_event, config=None, performance_tracker=None):
        """
        Initialize the analyzer

        Args:
            on_event: Callable receiving one FaceEvent per detected transition
            config: AnalyzerConfig (defaults when omitted)
            performance_tracker: Optional PerformanceTracker timing the
                analysis stage
        """
        self.on_event = on_event
        self.config = config or AnalyzerConfig()
        self.performance_tracker = performance_tracker

        cfg = self.config
        self.left_eye = OrificeTracker.for_eye(
            "leftEye", cfg.left_eye_threshold, cfg.ear_velocity_threshold,
            cfg.value_window, cfg.ear_velocity_window,
        )
        self.right_eye = OrificeTracker.for_eye(
            "rightEye", cfg.right_eye_threshold, cfg.ear_velocity_threshold,
            cfg.value_window, cfg.ear_velocity_window,
        )
        self.mouth = OrificeTracker.for_mouth(
            "mouth", cfg.mar_threshold, cfg.mar_velocity_threshold,
            cfg.value_window, cfg.mar_velocity_window, gating=cfg.mouth_gating,
        )
        self.head = HeadOrientationTracker(
            cfg.htr_threshold, cfg.htr_window, cfg.hpr_threshold, cfg.hpr_window,
        )

        self.frame_count = 0
        logger.debug("FaceAnalyzer created with %s", cfg)

    def _emit(self, event):
        logger.debug("Face event: %s %s", *event.as_pair())
        self.on_event(event)

    def _update_eye(self, tracker, side, raw_ear):
        kind = tracker.update(raw_ear)
        if kind == EventKind.CLOSE:
            self._emit(EyeClosed(side))
        elif kind == EventKind.OPEN:
            self._emit(EyeOpened(side))

    def _update_mouth(self, raw_mar):
        kind = self.mouth.update(raw_mar)
        if kind == EventKind.CLOSE:
            self._emit(MouthClosed())
        elif kind == EventKind.OPEN:
            self._emit(MouthOpened())

    def analyze_face(self, frame_landmarks):
        """
        Process one frame's landmarks for a single face

        Order is fixed: left eye, right eye, mouth, head turn, head pitch.
        An empty or missing frame is a no-op and leaves all state untouched.

        Args:
            frame_landmarks: Full ordered landmark sequence for the frame
        """
        tracker = self.performance_tracker
        if tracker is not None:
            tracker.start_stage("analysis")
        try:
            if frame_landmarks is None or len(frame_landmarks) == 0:
                return
            self._analyze(as_landmarks(frame_landmarks))
        finally:
            if tracker is not None:
                tracker.end_stage("analysis")

    def _analyze(self, landmarks):
        self.frame_count += 1

        raw_left_ear = calculate_ear(extract_points(landmarks, LEFT_EYE_LANDMARKS))
        raw_right_ear = calculate_ear(extract_points(landmarks, RIGHT_EYE_LANDMARKS))
        raw_mar = calculate_mar(extract_points(landmarks, MOUTH_LANDMARKS))

        nose, left_face, right_face, forehead, chin = extract_points(
            landmarks,
            [NOSE_CENTER, LEFT_FACE_SIDE, RIGHT_FACE_SIDE, FOREHEAD_TOP, CHIN_CENTER],
        )
        raw_htr = calculate_htr(nose, left_face, right_face)
        raw_hpr = calculate_hpr(nose, left_face, right_face, forehead, chin)

        self._update_eye(self.left_eye, Side.LEFT, raw_left_ear)
        self._update_eye(self.right_eye, Side.RIGHT, raw_right_ear)
        self._update_mouth(raw_mar)

        turn_event = self.head.update_turn(raw_htr)
        if turn_event is not None:
            self._emit(turn_event)

        pitch_event = self.head.update_pitch(raw_hpr)
        if pitch_event is not None:
            self._emit(pitch_event)

    def reset(self):
        """
        Reset all per-feature state

        Call when the face track is lost and reacquired so stale filters do
        not produce spurious transitions. Eyes default open, mouth closed,
        head back to center.
        """
        self.left_eye.reset()
        self.right_eye.reset()
        self.mouth.reset()
        self.head.reset()
        self.frame_count = 0
        logger.debug("FaceAnalyzer reset")

    def get_states(self):
        """Current open/closed state of each orifice"""
        return {
            'left_eye': self.left_eye.state.is_open,
            'right_eye': self.right_eye.state.is_open,
            'mouth': self.mouth.state.is_open,
        }

    def get_current_ratios(self):
        """Current median-filtered EAR and MAR values"""
        return {
            'left_ear': self.left_eye.current_value,
            'right_ear': self.right_eye.current_value,
            'mouth_mar': self.mouth.current_value,
        }

    def get_current_velocities(self):
        """Velocity medians and how many velocity samples back them"""
        return {
            'left_ear_velocity': self.left_eye.get_velocity(),
            'right_ear_velocity': self.right_eye.get_velocity(),
            'mouth_mar_velocity': self.mouth.get_velocity(),
            'left_velocity_count': self.left_eye.get_velocity_count(),
            'right_velocity_count': self.right_eye.get_velocity_count(),
            'mouth_velocity_count': self.mouth.get_velocity_count(),
        }

    def get_current_htr(self):
        return {
            'htr_average': self.head.turn.average.get_average(),
            'htr_count': self.head.turn.average.get_count(),
        }

    def get_current_hpr(self):
        return {
            'hpr_average': self.head.pitch.average.get_average(),
            'hpr_count': self.head.pitch.average.get_count(),
        }

    def get_head_orientation(self):
        return {
            'position': self.head.position.value,
            'pitch': self.head.pitch_position.value,
        }
