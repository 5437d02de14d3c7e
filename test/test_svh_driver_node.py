import os

import pytest

rclpy = pytest.importorskip('rclpy')
pytest.importorskip('std_srvs')

from rclpy.parameter import Parameter  # noqa: E402
from std_msgs.msg import Float32MultiArray  # noqa: E402

from svh_driver.drivers.channels import SVH_DIMENSION  # noqa: E402
from svh_driver.parameters.errors import ConfigMalformed  # noqa: E402
from svh_driver.nodes.svh_driver_node import SVHDriverNode  # noqa: E402

PACKAGE_CONFIG = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'config', 'svh_parameters.yaml'))


@pytest.fixture
def ros():
    rclpy.init()
    yield
    rclpy.shutdown()


def make_node(**overrides):
    parameters = {
        'parameter_file': PACKAGE_CONFIG,
        'simulated_firmware_version': [3, 5],
    }
    parameters.update(overrides)
    return SVHDriverNode(parameter_overrides=[Parameter(name, value=value) for name, value in parameters.items()])


def test_node_connects_with_simulated_hand(ros):
    node = make_node()
    try:
        assert node.finger_manager.is_connected()
        assert node.controller.firmware_version.major == 3
        assert list(node.finger_manager.position_settings) == [0, 1]
        assert not node.controller.channels_enabled
    finally:
        node.destroy_node()


def test_autostart_enables_channels(ros):
    node = make_node(autostart=True)
    try:
        assert node.controller.channels_enabled
    finally:
        node.destroy_node()


def test_force_limits_are_gated(ros):
    node = make_node()
    try:
        node.set_all_force_limits_callback(Float32MultiArray(data=[1.0] * SVH_DIMENSION))
        assert node.force_limits == [0.0] * SVH_DIMENSION
        assert node.finger_manager.force_limit_calls == []

        node.controller.home_all()
        node.set_force_limit_by_id_callback(Float32MultiArray(data=[2.0, 0.5]))
        assert node.force_limits[2] == 0.5
    finally:
        node.destroy_node()


def test_force_limit_request_with_invalid_channel_id(ros):
    node = make_node(autostart=True)
    try:
        node.set_force_limit_by_id_callback(Float32MultiArray(data=[float('nan'), 0.5]))
        node.set_force_limit_by_id_callback(Float32MultiArray(data=[float('inf'), 0.5]))
        assert node.finger_manager.force_limit_calls == []
        assert node.force_limits == [0.0] * SVH_DIMENSION
    finally:
        node.destroy_node()


def test_force_limit_is_capped_by_maximal_force(ros):
    node = make_node(autostart=True, maximal_force=0.5)
    try:
        node.set_force_limit_by_id_callback(Float32MultiArray(data=[1.0, 0.9]))
        assert node.force_limits[1] == 0.5
    finally:
        node.destroy_node()


def test_out_of_range_forced_version_is_a_config_error(ros):
    with pytest.raises(ConfigMalformed) as excinfo:
        make_node(use_major_version=70000)
    assert 'use_major_version' in excinfo.value.field
