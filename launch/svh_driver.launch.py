from launch import LaunchDescription
from launch_ros.actions import Node
from launch.actions import DeclareLaunchArgument
from launch.substitutions import LaunchConfiguration, PathJoinSubstitution
from launch_ros.substitutions import FindPackageShare

def generate_launch_description():
    # Starts the SVH driver node. Node settings come from 'config_file', the
    # firmware dependent controller settings from 'parameter_file'.
    return LaunchDescription([
        DeclareLaunchArgument(
            'config_file',
            default_value='svh_driver_params.yaml',
            description='Node parameter file in the package config directory'
        ),

        DeclareLaunchArgument(
            'parameter_file',
            default_value=PathJoinSubstitution([
                FindPackageShare('svh_driver'),
                'config',
                'svh_parameters.yaml'
            ]),
            description='Firmware dependent hand parameters (VERSIONS_PARAMETERS)'
        ),

        DeclareLaunchArgument(
            'serial_device',
            default_value='/dev/ttyUSB0',
            description='Serial device the hand is connected to'
        ),

        DeclareLaunchArgument(
            'autostart',
            default_value='false',
            description='Reset all fingers right after connecting'
        ),

        Node(
            package='svh_driver',
            executable='svh_driver_node',
            name='svh_driver',
            output='screen',
            parameters=[
                PathJoinSubstitution([
                    FindPackageShare('svh_driver'),
                    'config',
                    LaunchConfiguration('config_file')
                ]),
                {
                    'parameter_file': LaunchConfiguration('parameter_file'),
                    'serial_device': LaunchConfiguration('serial_device'),
                    'autostart': LaunchConfiguration('autostart'),
                }
            ]
        ),
    ])
