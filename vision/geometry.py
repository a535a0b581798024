# vision/geometry.py
"""
Geometric face metrics computed from landmark subsets

All functions are pure: the same points always give the same ratio.
Points only need x and y attributes (z is ignored).
- EAR: Eye Aspect Ratio (blink state)
- MAR: Mouth Aspect Ratio (mouth openness)
- HTR: Head Turn Ratio, positive when the head turns left
- HPR: Head Pitch Ratio, positive when the head tilts up
"""
import math


class LandmarkCountError(ValueError):
    """Raised when a metric receives the wrong number of landmarks"""


def distance(p1, p2):
    """
    Calculate Euclidean distance between two points in the x/y plane

    Args:
        p1: First point
        p2: Second point

    Returns:
        float: Euclidean distance
    """
    return math.sqrt((p1.x - p2.x) ** 2 + (p1.y - p2.y) ** 2)


def calculate_ear(eye_points):
    """
    Calculate Eye Aspect Ratio for a single eye

    Only the outer vertical span is used:
        EAR = |top_outer - bottom_outer| / |outer_corner - inner_corner|

    Args:
        eye_points: 6 ordered points [outer corner, top outer, top inner,
            inner corner, bottom inner, bottom outer]

    Returns:
        float: Eye Aspect Ratio, 0 when the eye has no horizontal span
    """
    if len(eye_points) < 6:
        raise LandmarkCountError(f"EAR needs 6 eye landmarks, got {len(eye_points)}")

    outer_corner, top_outer, _, inner_corner, _, bottom_outer = eye_points[:6]

    vertical = distance(top_outer, bottom_outer)
    horizontal = distance(outer_corner, inner_corner)

    return 0.0 if horizontal == 0 else vertical / horizontal


def calculate_mar(mouth_points):
    """
    Calculate Mouth Aspect Ratio

    Average of three vertical spans over the corner-to-corner width.

    Args:
        mouth_points: 8 ordered points [left corner, right corner, top outer,
            bottom outer, top middle, bottom middle, bottom inner, top inner]

    Returns:
        float: Mouth Aspect Ratio, 0 when the mouth has no horizontal span
    """
    if len(mouth_points) != 8:
        raise LandmarkCountError(f"MAR needs 8 mouth landmarks, got {len(mouth_points)}")

    vertical_1 = distance(mouth_points[2], mouth_points[3])
    vertical_2 = distance(mouth_points[4], mouth_points[5])
    vertical_3 = distance(mouth_points[6], mouth_points[7])
    horizontal = distance(mouth_points[0], mouth_points[1])

    if horizontal == 0:
        return 0.0
    return (vertical_1 + vertical_2 + vertical_3) / (3.0 * horizontal)


def calculate_htr(nose, left_face, right_face):
    """
    Calculate Head Turn Ratio

    Horizontal offset of the nose (philtrum) from the midpoint between the
    two face sides, in units of half the face width, clamped to [-1, 1] and
    passed through sin() for a softer response near center.

    Args:
        nose: Philtrum / nose point
        left_face: Left face side point
        right_face: Right face side point

    Returns:
        float: HTR in [-1, 1]; positive means turned left
    """
    face_width = right_face.x - left_face.x
    if face_width == 0:
        return 0.0

    half_width = face_width / 2.0
    mid_x = left_face.x + half_width
    ratio = (nose.x - mid_x) / half_width

    ratio = max(-1.0, min(1.0, ratio))
    return math.sin(ratio)


def calculate_hpr(nose, left_face, right_face, forehead, chin):
    """
    Calculate Head Pitch Ratio

    Signed perpendicular distance of the nose from the line through both
    face sides, normalized by forehead-to-chin height, passed through sin().

    Args:
        nose: Nose tip point
        left_face: Left face side point
        right_face: Right face side point
        forehead: Forehead top point
        chin: Chin center point

    Returns:
        float: HPR in [-1, 1]; positive means looking up
    """
    dx = right_face.x - left_face.x
    dy = right_face.y - left_face.y
    line_length = math.sqrt(dx ** 2 + dy ** 2)
    if line_length == 0:
        return 0.0

    numerator = (
        dy * nose.x
        - dx * nose.y
        + right_face.x * left_face.y
        - right_face.y * left_face.x
    )
    perpendicular = numerator / line_length

    head_height = distance(forehead, chin)
    if head_height == 0:
        return 0.0

    return math.sin(perpendicular / head_height)
