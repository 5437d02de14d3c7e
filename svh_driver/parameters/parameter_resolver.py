import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Type

from ..drivers.channels import (
    SVH_DIMENSION,
    ChannelSettings,
    CurrentSettings,
    HomeSettings,
    PositionSettings,
    SVHChannel,
    channel_from_name,
)
from .config_value import ConfigValue, ValueType
from .errors import ConfigError, ConfigMalformed, VersionUnmatched
from .firmware import FirmwareVersion
from .parameter_table import VERSIONS_SECTION, ParameterRecord, ParameterTable

# kind -> settings type and the keys it may appear under in a parameter set.
# position_controller / current_controller are the names used by older files.
SETTINGS_KINDS: Dict[str, Tuple[Type[ChannelSettings], Tuple[str, ...]]] = {
    'position': (PositionSettings, ('position_settings', 'position_controller')),
    'current': (CurrentSettings, ('current_settings', 'current_controller')),
    'home': (HomeSettings, ('home_settings',)),
}


def _unset() -> Tuple[None, ...]:
    return (None,) * SVH_DIMENSION


@dataclass(frozen=True)
class ResolvedParameterSet:
    """
    Per-channel settings to program into the finger manager for one firmware.

    ``None`` means the channel was not configured and the finger manager keeps
    its built-in default for it. Only the version and the settings take part
    in equality, so resolving the same inputs twice compares equal.
    """

    major: int
    minor: int
    position: Tuple[Optional[PositionSettings], ...] = field(default_factory=_unset)
    current: Tuple[Optional[CurrentSettings], ...] = field(default_factory=_unset)
    home: Tuple[Optional[HomeSettings], ...] = field(default_factory=_unset)
    record_path: Optional[str] = field(default=None, compare=False)
    issues: Tuple[ConfigError, ...] = field(default=(), compare=False)

    def __post_init__(self):
        for kind in SETTINGS_KINDS:
            if len(getattr(self, kind)) != SVH_DIMENSION:
                raise ValueError(f"{kind} settings need exactly {SVH_DIMENSION} entries")

    @property
    def version(self) -> FirmwareVersion:
        return FirmwareVersion(self.major, self.minor)

    def position_given(self, channel: int) -> bool:
        return self.position[channel] is not None

    def current_given(self, channel: int) -> bool:
        return self.current[channel] is not None

    def home_given(self, channel: int) -> bool:
        return self.home[channel] is not None

    def given_channels(self, kind: str) -> List[int]:
        return [channel for channel, settings in enumerate(getattr(self, kind)) if settings is not None]

    @property
    def is_empty(self) -> bool:
        return not any(self.given_channels(kind) for kind in SETTINGS_KINDS)


class ParameterResolver:
    """Turns the parameter set matching a firmware version into a ResolvedParameterSet."""

    def __init__(self, table: ParameterTable, logger=None):
        self.table = table
        self.logger = logger or logging.getLogger(__name__)

    def resolve(self, version: FirmwareVersion) -> ResolvedParameterSet:
        record = self.table.match(version)
        if record is None:
            issue = VersionUnmatched(VERSIONS_SECTION,
                                     f"no parameter set matches firmware {version}, "
                                     f"using hardware defaults for all channels")
            self.logger.warning(str(issue))
            return ResolvedParameterSet(version.major, version.minor, issues=(issue,))

        self.logger.info(f"Using parameter set {record.path} ({record.key}) for firmware {version}")
        issues: List[ConfigError] = []
        settings = {kind: self._resolve_kind(record, kind, issues) for kind in SETTINGS_KINDS}
        for issue in issues:
            self.logger.warning(f"Ignoring configured value, hardware default is kept: {issue}")

        return ResolvedParameterSet(
            version.major,
            version.minor,
            position=settings['position'],
            current=settings['current'],
            home=settings['home'],
            record_path=record.path,
            issues=tuple(issues),
        )

    def _resolve_kind(self, record: ParameterRecord, kind: str, issues: List[ConfigError]) -> tuple:
        settings_type, keys = SETTINGS_KINDS[kind]
        resolved = [None] * SVH_DIMENSION

        present = [key for key in keys if record.body.get(key) is not None]
        if not present:
            return tuple(resolved)
        if len(present) > 1:
            issues.append(ConfigMalformed(record.path, f"{' and '.join(present)} both configure {kind} settings"))
            return tuple(resolved)

        try:
            entries = self._channel_entries(record.body.get(present[0]))
        except ConfigMalformed as e:
            issues.append(e)
            return tuple(resolved)

        for channel, entry in entries:
            if entry.is_null:
                continue
            try:
                resolved[channel] = settings_type(entry.as_float_list())
            except ConfigMalformed as e:
                issues.append(e)
        return tuple(resolved)

    @staticmethod
    def _channel_entries(value: ConfigValue) -> List[Tuple[int, ConfigValue]]:
        """
        Accepts a list with one entry per channel, or a mapping from channel
        name / index to entry. Any structural problem rejects the whole kind.
        """
        if value.is_array:
            elements = value.elements()
            if len(elements) != SVH_DIMENSION:
                raise ConfigMalformed(value.path,
                                      f"expected {SVH_DIMENSION} channel entries, got {len(elements)}")
            return list(enumerate(elements))

        value.require(ValueType.RECORD)
        entries = {}
        for key, entry in value.items():
            if isinstance(key, bool):
                channel = None
            elif isinstance(key, int):
                channel = SVHChannel(key) if 0 <= key < SVH_DIMENSION else None
            else:
                channel = channel_from_name(str(key))
            if channel is None:
                raise ConfigMalformed(f"{value.path}.{key}", "unknown channel")
            if channel in entries:
                raise ConfigMalformed(f"{value.path}.{key}", f"channel {channel.name} configured twice")
            entries[channel] = entry
        return sorted(((int(channel), entry) for channel, entry in entries.items()), key=lambda item: item[0])
