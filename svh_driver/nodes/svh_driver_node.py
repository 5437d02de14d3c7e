#!/usr/bin/env python3

import math
import os
from functools import partial

import rclpy
from rclpy.node import Node
from rclpy.executors import MultiThreadedExecutor

from ament_index_python.packages import get_package_share_directory
from std_msgs.msg import Bool, Empty, Float32MultiArray, Int8, UInt8MultiArray
from std_srvs.srv import Trigger

from svh_driver.drivers.channel_state import ChannelEnableState
from svh_driver.drivers.channels import SVH_DIMENSION
from svh_driver.drivers.finger_manager import SimulatedFingerManager
from svh_driver.drivers.svh_controller import SVHController
from svh_driver.parameters.errors import ConfigError, ConfigMalformed
from svh_driver.parameters.firmware import FirmwareVersion
from svh_driver.parameters.loader import load_parameter_file


class SVHDriverNode(Node):
    def __init__(self, **kwargs):
        super().__init__('svh_driver', **kwargs)
        self.logger = self.get_logger()

        # Declare parameters with defaults
        self.declare_parameter('autostart', False)
        self.declare_parameter('serial_device', '/dev/ttyUSB0')
        self.declare_parameter('disable_flags', [False] * SVH_DIMENSION)
        self.declare_parameter('reset_timeout', 5)
        self.declare_parameter('name_prefix', 'left_hand')
        self.declare_parameter('connect_retry_count', 3)
        self.declare_parameter('maximal_force', 0.8)
        self.declare_parameter('use_major_version', 0)
        self.declare_parameter('use_minor_version', 0)
        self.declare_parameter('parameter_file', '')
        self.declare_parameter('simulation_mode', True)
        self.declare_parameter('simulated_firmware_version', [1, 0])

        self.autostart = self.get_parameter('autostart').value
        self.serial_device = self.get_parameter('serial_device').value
        self.disable_flags = list(self.get_parameter('disable_flags').value)
        self.reset_timeout = self.get_parameter('reset_timeout').value
        self.name_prefix = self.get_parameter('name_prefix').value
        self.connect_retry_count = self.get_parameter('connect_retry_count').value
        self.maximal_force = self.get_parameter('maximal_force').value
        self.simulation_mode = self.get_parameter('simulation_mode').value
        self.parameter_file = self.get_parameter('parameter_file').value or os.path.join(
            get_package_share_directory('svh_driver'), 'config', 'svh_parameters.yaml')

        self.logger.info(f"Name prefix for this hand was set to: {self.name_prefix}")

        if len(self.disable_flags) != SVH_DIMENSION:
            self.logger.error(f"disable_flags needs {SVH_DIMENSION} entries, got {len(self.disable_flags)}. "
                              f"All channels stay enabled")
            self.disable_flags = [False] * SVH_DIMENSION
        for channel, disabled in enumerate(self.disable_flags):
            if disabled:
                self.logger.warning(f"svh_driver disabling channel nr {channel}")

        try:
            forced_version = FirmwareVersion(self.get_parameter('use_major_version').value,
                                             self.get_parameter('use_minor_version').value)
        except ValueError as e:
            raise ConfigMalformed('use_major_version, use_minor_version', str(e)) from e

        if not self.simulation_mode:
            self.logger.error("No hardware transport available in this package")
            self.logger.error("Switching to simulation mode")
            self.simulation_mode = True

        simulated_version = self.get_parameter('simulated_firmware_version').value
        self.finger_manager = SimulatedFingerManager(
            FirmwareVersion(*simulated_version), self.disable_flags, self.reset_timeout, logger=self.logger)

        self.force_limits = [0.0] * SVH_DIMENSION
        self.channel_state = ChannelEnableState()
        self.controller = SVHController(
            self.finger_manager,
            partial(load_parameter_file, self.parameter_file),
            serial_device=self.serial_device,
            connect_retry_count=self.connect_retry_count,
            forced_version=None if forced_version.is_unknown else forced_version,
            logger=self.logger,
            channel_state=self.channel_state,
        )

        # Connect and start the reset so that the hand is ready for use.
        # A missing parameter section propagates: no safe defaults at this layer.
        self.controller.connect()
        if self.autostart:
            self.controller.autostart()
        else:
            self.logger.info("SVH driver ready, you will need to connect and reset the fingers "
                             "before you can use the hand.")

        self.controller.set_max_force(self.maximal_force)

        self.setup_ros_interfaces()

    def setup_ros_interfaces(self):
        """Setup ROS2 publishers, subscribers and services"""
        self.force_limits_pub = self.create_publisher(Float32MultiArray, 'force_limits', 10)
        self.enabled_pub = self.create_publisher(Bool, 'channels_enabled', 10)

        self.connect_sub = self.create_subscription(Empty, 'connect', self.connect_callback, 1)
        self.enable_sub = self.create_subscription(Int8, 'enable_channel', self.enable_channel_callback, 1)
        self.home_by_id_sub = self.create_subscription(
            UInt8MultiArray, 'home_reset_offset_by_id', self.home_by_id_callback, 1)
        self.all_force_limits_sub = self.create_subscription(
            Float32MultiArray, 'set_all_force_limits', self.set_all_force_limits_callback, 1)
        self.force_limit_by_id_sub = self.create_subscription(
            Float32MultiArray, 'set_force_limit_by_id', self.set_force_limit_by_id_callback, 1)

        self.home_all_srv = self.create_service(Trigger, 'home_reset_offset_all', self.home_all_callback)

        self.status_timer = self.create_timer(1.0, self.publish_status)

        self.logger.info("ROS2 interfaces initialized")

    def connect_callback(self, msg: Empty):
        self.logger.info("Trying to connect")
        try:
            self.controller.connect()
        except ConfigError as e:
            self.logger.fatal(f"Hand parameters could not be loaded, not connecting: {e}")

    def enable_channel_callback(self, msg: Int8):
        self.controller.enable_channel(msg.data)

    def home_all_callback(self, request, response):
        response.success = self.controller.home_all()
        response.message = 'Successfully reset' if response.success else 'Reset failed'
        return response

    def home_by_id_callback(self, msg: UInt8MultiArray):
        self.controller.home_by_ids(list(msg.data))

    def set_all_force_limits_callback(self, msg: Float32MultiArray):
        if len(msg.data) != SVH_DIMENSION:
            self.logger.error(f"set_all_force_limits needs {SVH_DIMENSION} values, got {len(msg.data)}")
            return
        applied = self.controller.set_all_force_limits(list(msg.data))
        for channel, limit in enumerate(applied):
            self.record_force_limit(channel, limit)
        self.publish_force_limits()

    def set_force_limit_by_id_callback(self, msg: Float32MultiArray):
        if len(msg.data) != 2:
            self.logger.error("set_force_limit_by_id expects [channel_id, force_limit]")
            return
        if not math.isfinite(msg.data[0]):
            self.logger.error(f"set_force_limit_by_id got an invalid channel id {msg.data[0]}")
            return
        channel = int(msg.data[0])
        applied = self.controller.set_channel_force_limit(channel, float(msg.data[1]))
        if 0 <= channel < SVH_DIMENSION:
            self.record_force_limit(channel, applied)
        self.publish_force_limits()

    def record_force_limit(self, channel, applied):
        # rejected requests are reported as 0.0
        self.force_limits[channel] = 0.0 if applied is None else float(applied)

    def publish_force_limits(self):
        msg = Float32MultiArray()
        msg.data = list(self.force_limits)
        self.force_limits_pub.publish(msg)

    def publish_status(self):
        self.enabled_pub.publish(Bool(data=self.controller.channels_enabled))

    def destroy_node(self):
        """Cleanup before shutdown"""
        self.logger.info("Shutting down SVH driver node")
        if hasattr(self, 'controller'):
            self.controller.disconnect()
        super().destroy_node()


def main(args=None):
    rclpy.init(args=args)

    try:
        node = SVHDriverNode()
    except ConfigError as e:
        rclpy.logging.get_logger('svh_driver').fatal(f"Invalid hand configuration: {e}")
        rclpy.shutdown()
        raise SystemExit(1)

    executor = MultiThreadedExecutor()
    executor.add_node(node)

    try:
        executor.spin()
    except KeyboardInterrupt:
        pass
    finally:
        executor.shutdown()
        node.destroy_node()
        rclpy.shutdown()


if __name__ == '__main__':
    main()
