from .errors import ConfigError, ConfigMalformed, ConfigNotFound, VersionUnmatched
from .firmware import FirmwareVersion
from .loader import load_parameter_file
from .parameter_resolver import ParameterResolver, ResolvedParameterSet
from .parameter_table import VERSIONS_SECTION, ParameterTable, VersionKey

__all__ = [
    'ConfigError',
    'ConfigMalformed',
    'ConfigNotFound',
    'FirmwareVersion',
    'ParameterResolver',
    'ParameterTable',
    'ResolvedParameterSet',
    'VERSIONS_SECTION',
    'VersionKey',
    'VersionUnmatched',
    'load_parameter_file',
]
