"""ROS 2 driver for the SCHUNK five finger hand (SVH)."""

__version__ = '1.0.0'
