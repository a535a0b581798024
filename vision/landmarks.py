# vision/landmarks.py
from collections import namedtuple

from vision.geometry import LandmarkCountError

# A single normalized landmark in [0, 1] video space. z is optional and
# ignored by every 2-D metric.
Landmark = namedtuple("Landmark", ["x", "y", "z"], defaults=(0.0,))

# MediaPipe Face Mesh (refined, 478 points)
FACE_MESH_LANDMARK_COUNT = 478

# 6 EAR points per eye:
# [outer corner, top outer, top inner, inner corner, bottom inner, bottom outer]
LEFT_EYE_LANDMARKS = [362, 385, 387, 263, 373, 380]
RIGHT_EYE_LANDMARKS = [33, 160, 158, 133, 153, 144]

# 8 MAR points:
# [left corner, right corner, top outer, bottom outer,
#  top middle, bottom middle, bottom inner, top inner]
MOUTH_LANDMARKS = [78, 308, 81, 178, 13, 14, 312, 317]

# Head orientation (turn and pitch both measured at the point below the nose)
NOSE_CENTER = 164
LEFT_FACE_SIDE = 137
RIGHT_FACE_SIDE = 366
FOREHEAD_TOP = 10
CHIN_CENTER = 19

# Overlay spawn points (top of each eye, outer side of each mouth corner)
LEFT_EYE_RADIAL_POINTS = [384, 386, 388]
RIGHT_EYE_RADIAL_POINTS = [161, 159, 157]
LEFT_MOUTH_RADIAL_POINTS = [40, 61, 91]
RIGHT_MOUTH_RADIAL_POINTS = [270, 300, 321]

# Star anchors
LEFT_EYE_INNER_CORNER = 263
RIGHT_EYE_INNER_CORNER = 33
LEFT_MOUTH_CORNER = 61
RIGHT_MOUTH_CORNER = 291


def to_landmark(point):
    """
    Coerce a detector point into a Landmark

    Accepts anything with x/y(/z) attributes (MediaPipe NormalizedLandmark)
    or a 2/3-element sequence.
    """
    if isinstance(point, Landmark):
        return point
    if hasattr(point, "x") and hasattr(point, "y"):
        return Landmark(float(point.x), float(point.y), float(getattr(point, "z", 0.0) or 0.0))
    return Landmark(*(float(v) for v in point))


def as_landmarks(points):
    """Convert a whole frame of detector points into a list of Landmarks"""
    return [to_landmark(p) for p in points]


def extract_points(landmarks, indices):
    """
    Pick an ordered subset of landmarks by index

    Args:
        landmarks: Full landmark sequence for one frame
        indices: Landmark indices to extract, in order

    Returns:
        list: Landmarks at the requested indices

    Raises:
        LandmarkCountError: If an index falls outside the frame
    """
    count = len(landmarks)
    points = []
    for idx in indices:
        if idx < 0 or idx >= count:
            raise LandmarkCountError(
                f"Landmark index {idx} out of range for a frame of {count} landmarks"
            )
        points.append(landmarks[idx])
    return points
