from setuptools import setup
import os
from glob import glob

package_name = 'svh_driver'

setup(
    name=package_name,
    version='1.0.0',
    packages=[
        package_name,
        f'{package_name}.nodes',
        f'{package_name}.drivers',
        f'{package_name}.parameters'
    ],
    data_files=[
        ('share/ament_index/resource_index/packages',
            ['resource/' + package_name]),
        ('share/' + package_name, ['package.xml']),
        (os.path.join('share', package_name, 'launch'),
         glob('launch/*.launch.py')),
        (os.path.join('share', package_name, 'config'),
         glob('config/*.yaml')),
    ],
    install_requires=['setuptools', 'PyYAML'],
    extras_require={
        'test': ['pytest'],
    },
    zip_safe=True,
    maintainer='SVH Driver Maintainers',
    maintainer_email='svh-driver@example.com',
    description='ROS2 Python driver for the SCHUNK five finger hand (SVH)',
    license='Apache-2.0',
    tests_require=['pytest'],
    entry_points={
        'console_scripts': [
            'svh_driver_node = svh_driver.nodes.svh_driver_node:main',
            'check_parameters = svh_driver.check_parameters:main',
        ],
    },
)
