class ConfigError(Exception):
    """Base class for problems found in the hand parameter configuration.

    ``field`` names the offending entry as a path into the configuration tree,
    e.g. ``VERSIONS_PARAMETERS[2].parameter_set.current_settings[3]``.
    """

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class ConfigNotFound(ConfigError):
    """The parameter file or its VERSIONS_PARAMETERS section is missing."""


class ConfigMalformed(ConfigError):
    """A record, settings list or value failed type or cardinality validation."""


class VersionUnmatched(ConfigError):
    """No parameter set matches the connected firmware version."""
