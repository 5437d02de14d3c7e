import os

import yaml

from .errors import ConfigMalformed, ConfigNotFound
from .parameter_table import VERSIONS_SECTION


def load_parameter_file(path: str, section: str = VERSIONS_SECTION):
    """
    Read the hand parameter file and return the raw parameter set list.

    The section may sit at the top level of the file or under
    ``<node name>: ros__parameters:`` as in a regular ROS 2 parameter file.
    """
    if not path or not os.path.isfile(path):
        raise ConfigNotFound(str(path), "parameter file does not exist")

    with open(path, 'r') as f:
        try:
            content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigMalformed(path, f"invalid YAML: {e}") from e

    if not isinstance(content, dict):
        raise ConfigNotFound(f"{path}:{section}", "file does not contain a parameter mapping")

    if section in content:
        value = content[section]
    else:
        value = None
        for node_parameters in content.values():
            ros_parameters = node_parameters.get('ros__parameters') if isinstance(node_parameters, dict) else None
            if isinstance(ros_parameters, dict) and section in ros_parameters:
                value = ros_parameters[section]
                break

    if value is None:
        raise ConfigNotFound(f"{path}:{section}", "section is missing")
    return value
