import pytest

from svh_driver.drivers.channels import SVH_ALL, SVH_DIMENSION, CurrentSettings, SVHChannel
from svh_driver.drivers.finger_manager import FingerManager, SimulatedFingerManager
from svh_driver.parameters.firmware import FirmwareVersion


def test_interface_cannot_be_instantiated():
    with pytest.raises(TypeError):
        FingerManager()


def test_reports_firmware_version():
    manager = SimulatedFingerManager(FirmwareVersion(3, 5))
    assert manager.get_firmware_info('/dev/ttyUSB0', 3) == FirmwareVersion(3, 5)


def test_reset_requires_connection():
    manager = SimulatedFingerManager()
    assert not manager.reset_channel(SVH_ALL)
    assert manager.connect('/dev/ttyUSB0', 3)
    assert manager.reset_channel(SVH_ALL)
    assert manager.is_homed(SVH_ALL)


def test_disabled_channels_are_not_homed():
    flags = [False] * SVH_DIMENSION
    flags[SVHChannel.PINKY] = True
    manager = SimulatedFingerManager(disable_flags=flags)
    manager.connect('/dev/ttyUSB0', 3)

    assert not manager.reset_channel(SVHChannel.PINKY)
    assert manager.reset_channel(SVH_ALL)
    assert manager.is_homed(SVH_ALL)
    assert not manager.is_homed(SVHChannel.PINKY)


def test_single_channel_homing():
    manager = SimulatedFingerManager()
    manager.connect('/dev/ttyUSB0', 3)
    assert manager.reset_channel(SVHChannel.THUMB_FLEXION)
    assert manager.is_homed(SVHChannel.THUMB_FLEXION)
    assert not manager.is_homed(SVH_ALL)


def test_reconnect_clears_homing():
    manager = SimulatedFingerManager()
    manager.connect('/dev/ttyUSB0', 3)
    manager.reset_channel(SVH_ALL)
    manager.connect('/dev/ttyUSB0', 3)
    assert not manager.is_homed(SVH_ALL)


def test_records_settings_and_force_limits():
    manager = SimulatedFingerManager()
    manager.set_current_settings(SVHChannel.PINKY, CurrentSettings((1.0, 2.0)))
    assert manager.current_settings[7] == CurrentSettings((1.0, 2.0))
    assert manager.set_force_limit(2, 0.5) == 0.5
    assert manager.set_force_limit(2, -1.0) == 0.0
    assert manager.force_limit_calls == [(2, 0.5), (2, -1.0)]


def test_invalid_channel():
    manager = SimulatedFingerManager()
    with pytest.raises(ValueError):
        manager.set_force_limit(SVH_DIMENSION, 1.0)


def test_wrong_disable_flag_count():
    with pytest.raises(ValueError):
        SimulatedFingerManager(disable_flags=[True])


def test_max_force_is_clamped():
    manager = SimulatedFingerManager()
    manager.set_max_force(1.7)
    assert manager.max_force == 1.0
    manager.set_max_force(0.8)
    assert manager.max_force == 0.8


def test_force_limit_is_capped_by_max_force():
    manager = SimulatedFingerManager()
    manager.set_max_force(0.5)
    assert manager.set_force_limit(0, 0.9) == 0.5
    assert manager.force_limits[0] == 0.5
    assert manager.set_force_limit(1, 0.25) == 0.25
