# vision/face_mesh.py
import logging

import cv2
import mediapipe as mp

logger = logging.getLogger(__name__)


class FaceMeshSource:
    """
    Landmark source backed by MediaPipe Face Mesh
    - Tracks a single face
    - Refined landmarks (478 points, iris included)
    - Returns the first face's landmarks or None when no face is found
    """

    def __init__(self, min_detection_confidence=0.5, min_tracking_confidence=0.5):
        """
        Initialize MediaPipe Face Mesh

        Args:
            min_detection_confidence: Minimum confidence to detect a face
            min_tracking_confidence: Minimum confidence to keep tracking it
        """
        self.mp_face_mesh = mp.solutions.face_mesh
        self.face_mesh = self.mp_face_mesh.FaceMesh(
            static_image_mode=False,
            max_num_faces=1,
            refine_landmarks=True,
            min_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence
        )

    def process_frame(self, frame):
        """
        Detect landmarks in a single frame

        Args:
            frame: Input frame (BGR format)

        Returns:
            list or None: Normalized landmarks of the tracked face
        """
        rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        mesh_results = self.face_mesh.process(rgb_frame)

        if not mesh_results.multi_face_landmarks:
            return None
        return list(mesh_results.multi_face_landmarks[0].landmark)

    def cleanup(self):
        """Clean up MediaPipe resources"""
        if hasattr(self, 'face_mesh'):
            self.face_mesh.close()
            logger.debug("Face mesh closed")
