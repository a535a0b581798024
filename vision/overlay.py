# vision/overlay.py
"""
Screen-space geometry for the event overlay

- Projects normalized landmarks onto a cover-fit (cropped, mirrored) preview
- Places 3 radial indicator lines above each eye and beside each mouth corner,
  angled relative to the face's up direction
- Smooths the 4 star anchors (inner eye corners, mouth corners) with
  per-axis median filters
- Tracks short-lived animated lines spawned by face events
"""
import itertools
import math
import time
from collections import namedtuple
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

from metrics.events import EyeClosed, MouthOpened, Side
from metrics.filters import MedianFilter
from vision.landmarks import (
    CHIN_CENTER,
    FOREHEAD_TOP,
    LEFT_EYE_INNER_CORNER,
    LEFT_EYE_RADIAL_POINTS,
    LEFT_MOUTH_CORNER,
    LEFT_MOUTH_RADIAL_POINTS,
    RIGHT_EYE_INNER_CORNER,
    RIGHT_EYE_RADIAL_POINTS,
    RIGHT_MOUTH_CORNER,
    RIGHT_MOUTH_RADIAL_POINTS,
    as_landmarks,
    extract_points,
)

Vec2 = namedtuple("Vec2", ["x", "y"])

BLINK_LINE_OFFSET_Y = 10
BLINK_ANGLE_OFFSET = 15
MOUTH_ANGLE_OFFSET = 30
MOUTH_LINE_OFFSET = Vec2(30, -10)
BLINK_LINE_DURATION_S = 0.3
MOUTH_LINE_DURATION_S = 1.0
DEFAULT_ANCHOR_WINDOW = 5


class AnchorRole(str, Enum):
    LEFT_EYE = "leftEye"
    RIGHT_EYE = "rightEye"
    LEFT_MOUTH = "leftMouth"
    RIGHT_MOUTH = "rightMouth"


EYE_ROLES = {Side.LEFT: AnchorRole.LEFT_EYE, Side.RIGHT: AnchorRole.RIGHT_EYE}
MOUTH_ROLES = {Side.LEFT: AnchorRole.LEFT_MOUTH, Side.RIGHT: AnchorRole.RIGHT_MOUTH}

LINE_DURATIONS = {
    AnchorRole.LEFT_EYE: BLINK_LINE_DURATION_S,
    AnchorRole.RIGHT_EYE: BLINK_LINE_DURATION_S,
    AnchorRole.LEFT_MOUTH: MOUTH_LINE_DURATION_S,
    AnchorRole.RIGHT_MOUTH: MOUTH_LINE_DURATION_S,
}


def cover_fit_properties(container_width, container_height, video_width, video_height):
    """
    How a video is scaled and cropped when displayed with cover-fit

    Args:
        container_width: Display area width in pixels
        container_height: Display area height in pixels
        video_width: Source video width in pixels
        video_height: Source video height in pixels

    Returns:
        tuple: (display_width, display_height, offset_x, offset_y) where the
            offsets are the amount cropped from each side
    """
    if not video_width or not video_height:
        raise ValueError("Video must have a width and height")
    if not container_width or not container_height:
        raise ValueError("Container must have a width and height")

    container_aspect = container_width / container_height
    video_aspect = video_width / video_height

    if video_aspect > container_aspect:
        # Wider than the container: fit to height, crop width
        display_height = container_height
        display_width = video_width * container_height / video_height
        offset_x = (display_width - container_width) / 2
        offset_y = 0.0
    else:
        # Taller than the container: fit to width, crop height
        display_width = container_width
        display_height = video_height * container_width / video_width
        offset_x = 0.0
        offset_y = (display_height - container_height) / 2

    return display_width, display_height, offset_x, offset_y


class CoverFitProjection:
    """
    Maps normalized landmarks to screen pixels for a cover-fit preview
    The preview is mirrored horizontally by default, like a selfie camera.
    """

    def __init__(self, container, video_size, mirrored=True):
        """
        Args:
            container: (left, top, width, height) of the display area
            video_size: (width, height) of the source video
            mirrored: Whether the preview is flipped horizontally
        """
        self.left, self.top, self.width, self.height = container
        self.mirrored = mirrored
        (self.display_width, self.display_height,
         self.offset_x, self.offset_y) = cover_fit_properties(
            self.width, self.height, video_size[0], video_size[1]
        )

    def __call__(self, landmark):
        x = landmark.x * self.display_width - self.offset_x
        y = landmark.y * self.display_height - self.offset_y
        if self.mirrored:
            return Vec2(self.left + self.width - x, self.top + y)
        return Vec2(self.left + x, self.top + y)


@dataclass
class LinePlacement:
    position: Vec2
    angle: float


@dataclass
class AnimationGeometry:
    left_eye_lines: List[LinePlacement]
    right_eye_lines: List[LinePlacement]
    left_mouth_lines: List[LinePlacement]
    right_mouth_lines: List[LinePlacement]
    anchors: Dict[AnchorRole, Vec2]

    def lines_for(self, role):
        return {
            AnchorRole.LEFT_EYE: self.left_eye_lines,
            AnchorRole.RIGHT_EYE: self.right_eye_lines,
            AnchorRole.LEFT_MOUTH: self.left_mouth_lines,
            AnchorRole.RIGHT_MOUTH: self.right_mouth_lines,
        }[role]


def face_up_angle(forehead, chin):
    """Angle in degrees of the forehead-to-chin vector on screen"""
    return math.degrees(math.atan2(chin.y - forehead.y, chin.x - forehead.x))


def blink_angle(index, up_angle):
    """Angle of eye line `index` (0-2), fanned around the face's up direction"""
    base = up_angle - 90
    offsets = (BLINK_ANGLE_OFFSET, 0, -BLINK_ANGLE_OFFSET)
    if not 0 <= index < len(offsets):
        raise ValueError(f"Invalid index: {index} for eye")
    return base + offsets[index]


def mouth_angle(index, side, up_angle):
    """Angle of mouth line `index` (0-2) on the given side"""
    base = up_angle + 180 if side == Side.RIGHT else up_angle
    offset = MOUTH_ANGLE_OFFSET if side == Side.LEFT else -MOUTH_ANGLE_OFFSET
    if index == 0:
        return base - offset
    if index == 1:
        return base
    if index == 2:
        return base + offset
    raise ValueError(f"Invalid index: {index} for mouth")


def _blink_offset(point):
    return Vec2(point.x, point.y - BLINK_LINE_OFFSET_Y)


def _mouth_offset(point, side):
    dx = MOUTH_LINE_OFFSET.x if side == Side.LEFT else -MOUTH_LINE_OFFSET.x
    return Vec2(point.x + dx, point.y - MOUTH_LINE_OFFSET.y)


def calculate_animations(landmarks, to_screen):
    """
    Compute overlay geometry for one frame

    Args:
        landmarks: Full landmark sequence for the frame
        to_screen: Callable mapping a normalized landmark to a screen Vec2

    Returns:
        AnimationGeometry: Line placements per side and raw anchor points
    """
    landmarks = as_landmarks(landmarks)

    def project(indices):
        return [to_screen(p) for p in extract_points(landmarks, indices)]

    forehead, chin = project([FOREHEAD_TOP, CHIN_CENTER])
    up = face_up_angle(forehead, chin)

    def eye_lines(indices):
        return [LinePlacement(_blink_offset(p), blink_angle(i, up))
                for i, p in enumerate(project(indices))]

    def mouth_lines(indices, side):
        return [LinePlacement(_mouth_offset(p, side), mouth_angle(i, side, up))
                for i, p in enumerate(project(indices))]

    left_eye_corner, right_eye_corner, left_mouth_corner, right_mouth_corner = project(
        [LEFT_EYE_INNER_CORNER, RIGHT_EYE_INNER_CORNER, LEFT_MOUTH_CORNER, RIGHT_MOUTH_CORNER]
    )

    return AnimationGeometry(
        left_eye_lines=eye_lines(LEFT_EYE_RADIAL_POINTS),
        right_eye_lines=eye_lines(RIGHT_EYE_RADIAL_POINTS),
        left_mouth_lines=mouth_lines(LEFT_MOUTH_RADIAL_POINTS, Side.LEFT),
        right_mouth_lines=mouth_lines(RIGHT_MOUTH_RADIAL_POINTS, Side.RIGHT),
        anchors={
            AnchorRole.LEFT_EYE: left_eye_corner,
            AnchorRole.RIGHT_EYE: right_eye_corner,
            AnchorRole.LEFT_MOUTH: left_mouth_corner,
            AnchorRole.RIGHT_MOUTH: right_mouth_corner,
        },
    )


class AnchorSmoother:
    """
    Bank of x/y median filters, one pair per anchor role
    """

    def __init__(self, window_size=DEFAULT_ANCHOR_WINDOW):
        self.filters = {
            role: (MedianFilter(window_size), MedianFilter(window_size))
            for role in AnchorRole
        }

    def update(self, anchors):
        """
        Push raw anchor points and read back smoothed ones

        Args:
            anchors: Mapping of AnchorRole to raw screen Vec2 (roles may be
                missing; their filters are left untouched)

        Returns:
            dict: AnchorRole -> smoothed Vec2 for every role supplied
        """
        smoothed = {}
        for role, point in anchors.items():
            if point is None:
                continue
            x_filter, y_filter = self.filters[AnchorRole(role)]
            x_filter.add_value(point.x)
            y_filter.add_value(point.y)
            smoothed[AnchorRole(role)] = Vec2(x_filter.get_median(), y_filter.get_median())
        return smoothed

    def reset(self):
        for x_filter, y_filter in self.filters.values():
            x_filter.reset()
            y_filter.reset()


@dataclass
class Star:
    id: str
    role: AnchorRole
    position: Vec2 = field(default_factory=lambda: Vec2(0.0, 0.0))


@dataclass
class AnimatedLine:
    id: str
    role: AnchorRole
    index: int
    position: Vec2
    angle: float
    created_at: float


class OverlayTracker:
    """
    Overlay state following one face
    - 4 stars that continuously follow the smoothed anchors
    - Animated lines spawned on events that track the face until they expire
    """

    def __init__(self, anchor_window=DEFAULT_ANCHOR_WINDOW, clock=None):
        self.clock = clock or time.monotonic
        self.smoother = AnchorSmoother(anchor_window)
        self.stars = [Star(f"{role.value}-star", role) for role in AnchorRole]
        self.lines = []
        self.geometry = None
        self._ids = itertools.count()

    def push_landmarks(self, landmarks, to_screen):
        """
        Update geometry from a new frame

        Args:
            landmarks: Full landmark sequence for the frame
            to_screen: Landmark-to-screen mapping

        Returns:
            AnimationGeometry: Geometry computed for this frame
        """
        geometry = calculate_animations(landmarks, to_screen)
        self.geometry = geometry

        for line in self.lines:
            placements = geometry.lines_for(line.role)
            if line.index < len(placements):
                line.position = placements[line.index].position
                line.angle = placements[line.index].angle

        smoothed = self.smoother.update(geometry.anchors)
        for star in self.stars:
            if star.role in smoothed:
                star.position = smoothed[star.role]
        return geometry

    def _spawn(self, role, now):
        if self.geometry is None:
            return []
        now = self.clock() if now is None else now
        spawned = []
        for index, placement in enumerate(self.geometry.lines_for(role)):
            line = AnimatedLine(
                id=f"line-{role.value}-{index}-{next(self._ids)}",
                role=role,
                index=index,
                position=placement.position,
                angle=placement.angle,
                created_at=now,
            )
            spawned.append(line)
        self.lines.extend(spawned)
        return spawned

    def spawn_eye_lines(self, side, now=None):
        return self._spawn(EYE_ROLES[Side(side)], now)

    def spawn_mouth_lines(self, side, now=None):
        return self._spawn(MOUTH_ROLES[Side(side)], now)

    def expire(self, now=None):
        """Drop lines older than their role's duration"""
        now = self.clock() if now is None else now
        self.lines = [
            line for line in self.lines
            if now - line.created_at < LINE_DURATIONS[line.role]
        ]

    def handle_event(self, event, now=None):
        """Spawn lines for the events the overlay reacts to"""
        if isinstance(event, EyeClosed):
            return self.spawn_eye_lines(event.side, now)
        if isinstance(event, MouthOpened):
            return self.spawn_mouth_lines(Side.LEFT, now) + self.spawn_mouth_lines(Side.RIGHT, now)
        return []

    def star_positions(self):
        return {star.role: star.position for star in self.stars}

    def reset(self):
        self.smoother.reset()
        self.lines = []
        self.geometry = None
        for star in self.stars:
            star.position = Vec2(0.0, 0.0)
