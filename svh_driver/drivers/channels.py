from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Optional, Tuple


class SVHChannel(IntEnum):
    """Actuated joints of the five finger hand, in controller order."""
    THUMB_FLEXION = 0
    THUMB_OPPOSITION = 1
    INDEX_FINGER_DISTAL = 2
    INDEX_FINGER_PROXIMAL = 3
    MIDDLE_FINGER_DISTAL = 4
    MIDDLE_FINGER_PROXIMAL = 5
    RING_FINGER = 6
    PINKY = 7
    FINGER_SPREAD = 8


SVH_DIMENSION = len(SVHChannel)

# Addresses every channel in reset/homing requests
SVH_ALL = -1


def channel_from_name(name: str) -> Optional[SVHChannel]:
    try:
        return SVHChannel[name.strip().upper()]
    except KeyError:
        return None


def is_valid_channel(channel) -> bool:
    return (isinstance(channel, int) and not isinstance(channel, bool)
            and 0 <= channel < SVH_DIMENSION)


@dataclass(frozen=True)
class ChannelSettings:
    """
    Controller coefficients for one channel.

    The finger manager defines how many coefficients each kind has and what
    they mean; here they are only an ordered tuple of floats.
    """

    values: Tuple[float, ...]

    @classmethod
    def from_sequence(cls, values: Iterable[float]):
        return cls(tuple(float(value) for value in values))

    def __iter__(self):
        return iter(self.values)

    def __len__(self):
        return len(self.values)


@dataclass(frozen=True)
class PositionSettings(ChannelSettings):
    """wmn, wmx, dwmx, ky, dt, imn, imx, kp, ki, kd"""


@dataclass(frozen=True)
class CurrentSettings(ChannelSettings):
    """wmn, wmx, ky, dt, imn, imx, kp, ki, umn, umx"""


@dataclass(frozen=True)
class HomeSettings(ChannelSettings):
    """direction, minimum offset, maximum offset, idle position, range, reset current factor"""
