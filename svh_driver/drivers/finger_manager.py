import logging
from abc import ABC, abstractmethod
from threading import Lock
from typing import Dict, List, Optional

from ..parameters.firmware import FirmwareVersion
from .channels import (
    SVH_ALL,
    SVH_DIMENSION,
    CurrentSettings,
    HomeSettings,
    PositionSettings,
    is_valid_channel,
)


class FingerManager(ABC):
    """
    Interface of the hardware channel manager that talks to the hand.

    The transport (serial protocol, controller feedback, homing sequence)
    lives behind this interface. The driver only programs parameters into it
    and forwards commands.
    """

    @abstractmethod
    def get_firmware_info(self, device: str, retries: int) -> FirmwareVersion:
        """Version reported by the hand, 0.0 if it did not answer."""

    @abstractmethod
    def connect(self, device: str, retries: int) -> bool:
        pass

    @abstractmethod
    def disconnect(self):
        pass

    @abstractmethod
    def is_connected(self) -> bool:
        pass

    @abstractmethod
    def reset_channel(self, channel: int) -> bool:
        """Home one channel, or every channel for SVH_ALL."""

    @abstractmethod
    def is_homed(self, channel: int) -> bool:
        pass

    @abstractmethod
    def enable_channel(self, channel: int) -> bool:
        pass

    @abstractmethod
    def set_current_settings(self, channel: int, settings: CurrentSettings):
        pass

    @abstractmethod
    def set_position_settings(self, channel: int, settings: PositionSettings):
        pass

    @abstractmethod
    def set_home_settings(self, channel: int, settings: HomeSettings):
        pass

    @abstractmethod
    def set_force_limit(self, channel: int, force_limit: float) -> float:
        """Returns the force limit actually applied."""

    @abstractmethod
    def set_max_force(self, max_force: float):
        pass


class SimulatedFingerManager(FingerManager):
    """
    In-memory hand used in simulation mode and tests.

    Reports a fixed firmware version, homes every channel that is not disabled
    and remembers the settings programmed into it.
    """

    def __init__(self, firmware_version: FirmwareVersion = FirmwareVersion(1, 0),
                 disable_flags: Optional[List[bool]] = None, reset_timeout: int = 5,
                 logger=None):
        self.logger = logger or logging.getLogger(__name__)
        self.firmware_version = firmware_version
        self.disable_flags = list(disable_flags) if disable_flags else [False] * SVH_DIMENSION
        if len(self.disable_flags) != SVH_DIMENSION:
            raise ValueError(f"disable_flags needs {SVH_DIMENSION} entries, got {len(self.disable_flags)}")
        self.reset_timeout = reset_timeout
        self.device = None
        self.max_force = 1.0
        self.lock = Lock()

        self.current_settings: Dict[int, CurrentSettings] = {}
        self.position_settings: Dict[int, PositionSettings] = {}
        self.home_settings: Dict[int, HomeSettings] = {}
        self.force_limits = [0.0] * SVH_DIMENSION
        self.force_limit_calls = []

        self._connected = False
        self._homed = [False] * SVH_DIMENSION
        self._enabled = [False] * SVH_DIMENSION

    def _channels(self, channel: int) -> List[int]:
        if channel == SVH_ALL:
            return [c for c in range(SVH_DIMENSION) if not self.disable_flags[c]]
        if not is_valid_channel(channel):
            raise ValueError(f"Invalid channel {channel}")
        return [channel]

    def get_firmware_info(self, device: str, retries: int) -> FirmwareVersion:
        self.logger.info(f"Simulated hand on {device} reports firmware {self.firmware_version}")
        return self.firmware_version

    def connect(self, device: str, retries: int) -> bool:
        with self.lock:
            self.device = device
            self._connected = True
            self._homed = [False] * SVH_DIMENSION
            self._enabled = [False] * SVH_DIMENSION
        return True

    def disconnect(self):
        with self.lock:
            self._connected = False
            self._enabled = [False] * SVH_DIMENSION

    def is_connected(self) -> bool:
        return self._connected

    def reset_channel(self, channel: int) -> bool:
        with self.lock:
            if not self._connected:
                return False
            if channel != SVH_ALL and is_valid_channel(channel) and self.disable_flags[channel]:
                self.logger.warning(f"Channel {channel} is disabled and will not be homed")
                return False
            for c in self._channels(channel):
                self._homed[c] = True
                self._enabled[c] = True
            return True

    def is_homed(self, channel: int) -> bool:
        with self.lock:
            channels = self._channels(channel)
            return bool(channels) and all(self._homed[c] for c in channels)

    def enable_channel(self, channel: int) -> bool:
        with self.lock:
            if not self._connected:
                return False
            for c in self._channels(channel):
                if self._homed[c]:
                    self._enabled[c] = True
            return all(self._enabled[c] for c in self._channels(channel))

    def is_enabled(self, channel: int) -> bool:
        with self.lock:
            return all(self._enabled[c] for c in self._channels(channel))

    def set_current_settings(self, channel: int, settings: CurrentSettings):
        self._channels(channel)
        self.current_settings[channel] = settings

    def set_position_settings(self, channel: int, settings: PositionSettings):
        self._channels(channel)
        self.position_settings[channel] = settings

    def set_home_settings(self, channel: int, settings: HomeSettings):
        self._channels(channel)
        self.home_settings[channel] = settings

    def set_force_limit(self, channel: int, force_limit: float) -> float:
        with self.lock:
            self._channels(channel)
            self.force_limit_calls.append((channel, force_limit))
            applied = min(self.max_force, max(0.0, float(force_limit)))
            self.force_limits[channel] = applied
            return applied

    def set_max_force(self, max_force: float):
        self.max_force = min(1.0, max(0.0, float(max_force)))
