"""Synthetic landmark frames with known EAR / MAR / HTR / HPR values."""

import math

from vision.landmarks import (
    CHIN_CENTER,
    FACE_MESH_LANDMARK_COUNT,
    FOREHEAD_TOP,
    LEFT_EYE_LANDMARKS,
    LEFT_FACE_SIDE,
    Landmark,
    MOUTH_LANDMARKS,
    NOSE_CENTER,
    RIGHT_EYE_LANDMARKS,
    RIGHT_FACE_SIDE,
)

LEFT_EYE_CENTER = (0.62, 0.4)
RIGHT_EYE_CENTER = (0.38, 0.4)
EYE_HALF_WIDTH = 0.02
MOUTH_CENTER = (0.5, 0.7)
MOUTH_HALF_WIDTH = 0.05


def _place_eye(points, indices, center, ear):
    cx, cy = center
    half_span = ear * EYE_HALF_WIDTH
    outer, top_outer, top_inner, inner, bottom_inner, bottom_outer = indices
    points[outer] = Landmark(cx - EYE_HALF_WIDTH, cy)
    points[inner] = Landmark(cx + EYE_HALF_WIDTH, cy)
    points[top_outer] = Landmark(cx - 0.01, cy - half_span)
    points[bottom_outer] = Landmark(cx - 0.01, cy + half_span)
    points[top_inner] = Landmark(cx + 0.01, cy - half_span)
    points[bottom_inner] = Landmark(cx + 0.01, cy + half_span)


def _place_mouth(points, mar):
    cx, cy = MOUTH_CENTER
    half_span = mar * MOUTH_HALF_WIDTH
    left, right = MOUTH_LANDMARKS[0], MOUTH_LANDMARKS[1]
    points[left] = Landmark(cx - MOUTH_HALF_WIDTH, cy)
    points[right] = Landmark(cx + MOUTH_HALF_WIDTH, cy)
    for offset, (top, bottom) in zip(
        (-0.02, 0.0, 0.02),
        [(MOUTH_LANDMARKS[2], MOUTH_LANDMARKS[3]),
         (MOUTH_LANDMARKS[4], MOUTH_LANDMARKS[5]),
         (MOUTH_LANDMARKS[7], MOUTH_LANDMARKS[6])],
    ):
        points[top] = Landmark(cx + offset, cy - half_span)
        points[bottom] = Landmark(cx + offset, cy + half_span)


def make_frame(left_ear=0.35, right_ear=0.35, mar=0.1, htr=0.0, hpr=0.0):
    """
    Build a full 478-point frame whose metrics come out at the given values

    Face sides sit at x=0.3 / x=0.7 on y=0.5 and the forehead-to-chin height
    is 0.6, so HTR and HPR can be set by inverting their sin() mapping
    on landmark 164.
    """
    points = [Landmark(0.5, 0.5) for _ in range(FACE_MESH_LANDMARK_COUNT)]

    _place_eye(points, LEFT_EYE_LANDMARKS, LEFT_EYE_CENTER, left_ear)
    _place_eye(points, RIGHT_EYE_LANDMARKS, RIGHT_EYE_CENTER, right_ear)
    _place_mouth(points, mar)

    points[LEFT_FACE_SIDE] = Landmark(0.3, 0.5)
    points[RIGHT_FACE_SIDE] = Landmark(0.7, 0.5)
    points[FOREHEAD_TOP] = Landmark(0.5, 0.2)
    points[CHIN_CENTER] = Landmark(0.5, 0.8)
    # HTR reads only x, HPR only the offset from the horizontal face-side line
    points[NOSE_CENTER] = Landmark(0.5 + 0.2 * math.asin(htr), 0.5 - 0.6 * math.asin(hpr))
    return points


def make_frames(count, **values):
    return [make_frame(**values) for _ in range(count)]


class FakeClock:
    """Manually advanced clock returning seconds"""

    def __init__(self, start=100.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds
