# metrics/events.py
"""
Discrete face events emitted by the analyzer

Each event is its own frozen dataclass so consumers can dispatch on type.
Every event still exposes the (body_part, kind) pair used by older callbacks.
"""
from dataclasses import dataclass
from enum import Enum


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class BodyPart(str, Enum):
    LEFT_EYE = "leftEye"
    RIGHT_EYE = "rightEye"
    MOUTH = "mouth"
    HEAD = "head"


class EventKind(str, Enum):
    OPEN = "open"
    CLOSE = "close"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


class TurnDirection(str, Enum):
    CENTER = "center"
    LEFT = "left"
    RIGHT = "right"


class PitchDirection(str, Enum):
    CENTER = "center"
    UP = "up"
    DOWN = "down"


def eye_part(side):
    return BodyPart.LEFT_EYE if side == Side.LEFT else BodyPart.RIGHT_EYE


class FaceEvent:
    """Base class for all analyzer events"""

    @property
    def body_part(self):
        raise NotImplementedError

    @property
    def kind(self):
        raise NotImplementedError

    def as_pair(self):
        """Return the (body_part, kind) string pair"""
        return self.body_part.value, self.kind.value


@dataclass(frozen=True)
class EyeClosed(FaceEvent):
    side: Side

    @property
    def body_part(self):
        return eye_part(self.side)

    @property
    def kind(self):
        return EventKind.CLOSE


@dataclass(frozen=True)
class EyeOpened(FaceEvent):
    side: Side

    @property
    def body_part(self):
        return eye_part(self.side)

    @property
    def kind(self):
        return EventKind.OPEN


@dataclass(frozen=True)
class MouthOpened(FaceEvent):

    @property
    def body_part(self):
        return BodyPart.MOUTH

    @property
    def kind(self):
        return EventKind.OPEN


@dataclass(frozen=True)
class MouthClosed(FaceEvent):

    @property
    def body_part(self):
        return BodyPart.MOUTH

    @property
    def kind(self):
        return EventKind.CLOSE


@dataclass(frozen=True)
class HeadTurned(FaceEvent):
    direction: TurnDirection

    @property
    def body_part(self):
        return BodyPart.HEAD

    @property
    def kind(self):
        return EventKind(self.direction.value)


@dataclass(frozen=True)
class HeadPitched(FaceEvent):
    direction: PitchDirection

    @property
    def body_part(self):
        return BodyPart.HEAD

    @property
    def kind(self):
        return EventKind(self.direction.value)
