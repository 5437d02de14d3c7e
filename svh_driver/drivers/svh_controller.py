import logging
from typing import Any, Callable, Iterable, List, Optional

from ..parameters.errors import ConfigNotFound
from ..parameters.firmware import FirmwareVersion
from ..parameters.parameter_resolver import ParameterResolver, ResolvedParameterSet
from ..parameters.parameter_table import ParameterTable
from .channel_state import ChannelEnableState
from .channels import SVH_ALL, SVH_DIMENSION, SVHChannel, is_valid_channel
from .finger_manager import FingerManager


class SVHController:
    """
    Hand control logic behind the ROS interfaces.

    Keeps the firmware version, programs version dependent parameters into the
    finger manager on every connect and guards force limit changes with the
    shared channel enable state. Nothing in here depends on rclpy.
    """

    def __init__(self, finger_manager: FingerManager, parameter_loader: Callable[[], Any],
                 serial_device: str = '/dev/ttyUSB0', connect_retry_count: int = 3,
                 forced_version: Optional[FirmwareVersion] = None, logger=None,
                 channel_state: Optional[ChannelEnableState] = None):
        self.finger_manager = finger_manager
        self.parameter_loader = parameter_loader
        self.serial_device = serial_device
        self.connect_retry_count = connect_retry_count
        self.logger = logger or logging.getLogger(__name__)
        self.channel_state = channel_state if channel_state is not None else ChannelEnableState()

        # 0.0 means "ask the hand"
        self.firmware_version = forced_version or FirmwareVersion(0, 0)
        if not self.firmware_version.is_unknown:
            self.logger.info(f"Forced hand version {self.firmware_version}")

    @property
    def channels_enabled(self) -> bool:
        return self.channel_state.enabled

    def set_diagnostics_enable(self, enabled: bool):
        """Entry point for diagnostics, which stop and restart the control loop."""
        self.channel_state.set(enabled)

    def connect(self) -> bool:
        """
        (Re)connect to the hand.

        Reads the firmware version unless one is known, programs the matching
        parameters and opens the connection. Channels stay disabled until they
        are homed. Raises ConfigNotFound if the parameter section is missing.
        """
        self.channel_state.disable()

        if self.finger_manager.is_connected():
            self.finger_manager.disconnect()

        if self.firmware_version.is_unknown:
            self.firmware_version = self.finger_manager.get_firmware_info(
                self.serial_device, self.connect_retry_count)
            self.logger.info(f"Current hand version {self.firmware_version}")

        if self.firmware_version.is_unknown:
            self.logger.error(f"Could not get version info from the hand on {self.serial_device} "
                              f"with retry count {self.connect_retry_count}")
            return False

        self.init_controller_parameters(self.firmware_version)

        if not self.finger_manager.connect(self.serial_device, self.connect_retry_count):
            self.logger.error(f"Could not connect to the hand on {self.serial_device} "
                              f"with retry count {self.connect_retry_count}")
            return False

        self.logger.info(f"Connected to the hand on {self.serial_device}")
        return True

    def resolve_parameters(self, version: FirmwareVersion) -> ResolvedParameterSet:
        raw = self.parameter_loader()
        if raw is None:
            raise ConfigNotFound('VERSIONS_PARAMETERS', "no parameter sets configured")
        table = ParameterTable.from_config(raw, logger=self.logger)
        return ParameterResolver(table, logger=self.logger).resolve(version)

    def init_controller_parameters(self, version: FirmwareVersion) -> ResolvedParameterSet:
        """Program the configured settings for this firmware; untouched channels keep their defaults."""
        parameters = self.resolve_parameters(version)
        self.apply_parameters(parameters)
        return parameters

    def apply_parameters(self, parameters: ResolvedParameterSet):
        for channel in SVHChannel:
            current = parameters.current[channel]
            if current is not None:
                self.finger_manager.set_current_settings(channel, current)
            position = parameters.position[channel]
            if position is not None:
                self.finger_manager.set_position_settings(channel, position)
            home = parameters.home[channel]
            if home is not None:
                self.finger_manager.set_home_settings(channel, home)

        self.logger.info(
            f"Applied parameters for firmware {parameters.version}: "
            f"current {parameters.given_channels('current')}, "
            f"position {parameters.given_channels('position')}, "
            f"home {parameters.given_channels('home')}")

    def autostart(self) -> bool:
        if self.finger_manager.reset_channel(SVH_ALL):
            self.logger.info("Driver was autostarted! Input can now be sent. Have a safe and productive day!")
            self.channel_state.enable()
            return True
        self.logger.error("Tried to reset the fingers by autostart: Not succeeded!")
        return False

    def home_all(self) -> bool:
        self.channel_state.disable()
        success = self.finger_manager.reset_channel(SVH_ALL)
        if success:
            self.logger.info("Successfully reset all channels")
            self.channel_state.enable()
        else:
            self.logger.error("Resetting all channels failed")
        return success

    def home_by_ids(self, channel_ids: Iterable[int]) -> bool:
        """
        Home the listed channels. The control loop is enabled afterwards if it
        was enabled before or if all channels are homed now.
        """
        enabled_before = self.channel_state.disable_and_get_previous()
        if not enabled_before:
            self.logger.warning("After resetting the requested channels the control loop will not be enabled")

        for channel in channel_ids:
            if not is_valid_channel(channel):
                self.logger.warning(f"Ignoring reset request for invalid channel {channel}")
                continue
            if not self.finger_manager.reset_channel(channel):
                self.logger.warning(f"Resetting channel {SVHChannel(channel).name} failed")

        if enabled_before or self.finger_manager.is_homed(SVH_ALL):
            self.channel_state.enable()
        return True

    def enable_channel(self, channel: int) -> bool:
        if channel != SVH_ALL and not is_valid_channel(channel):
            self.logger.warning(f"Ignoring enable request for invalid channel {channel}")
            return False
        return self.finger_manager.enable_channel(channel)

    def set_max_force(self, max_force: float):
        self.finger_manager.set_max_force(max_force)

    def set_channel_force_limit(self, channel: int, force_limit: float) -> Optional[float]:
        """
        Forward a force limit while the channels are enabled.

        Returns the applied limit, or None if the request was rejected. No
        force changes while the control loop is disabled so the reset and
        diagnostics sequences are not disturbed.
        """
        if not is_valid_channel(channel):
            self.logger.warning(f"Rejected force limit for invalid channel {channel}")
            return None
        if not self.channel_state.enabled:
            self.logger.warning(f"Rejected force limit for channel {SVHChannel(channel).name}: "
                                f"channels are not enabled")
            return None
        return self.finger_manager.set_force_limit(channel, force_limit)

    def set_all_force_limits(self, force_limits: List[float]) -> List[Optional[float]]:
        if len(force_limits) != SVH_DIMENSION:
            raise ValueError(f"Expected {SVH_DIMENSION} force limits, got {len(force_limits)}")
        return [self.set_channel_force_limit(channel, limit) for channel, limit in enumerate(force_limits)]

    def disconnect(self):
        self.channel_state.disable()
        self.finger_manager.disconnect()
