import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, List, Optional, Tuple

from .config_value import ConfigValue, ValueType
from .errors import ConfigError, ConfigMalformed, ConfigNotFound
from .firmware import VERSION_COMPONENT_MAX, FirmwareVersion

VERSIONS_SECTION = 'VERSIONS_PARAMETERS'

_LOWEST = FirmwareVersion(0, 0)
_HIGHEST = FirmwareVersion(VERSION_COMPONENT_MAX, VERSION_COMPONENT_MAX)


class KeyKind(IntEnum):
    """How a parameter set selects firmware versions. Higher value = more specific."""
    ANY = 0
    RANGE = 1
    MAJOR = 2
    EXACT = 3


@dataclass(frozen=True)
class VersionKey:
    """Inclusive firmware interval a parameter set applies to."""

    kind: KeyKind
    lower: FirmwareVersion
    upper: FirmwareVersion

    @classmethod
    def exact(cls, version: FirmwareVersion) -> 'VersionKey':
        return cls(KeyKind.EXACT, version, version)

    @classmethod
    def major_only(cls, major: int) -> 'VersionKey':
        return cls(KeyKind.MAJOR, FirmwareVersion(major, 0), FirmwareVersion(major, VERSION_COMPONENT_MAX))

    @classmethod
    def range(cls, lower: FirmwareVersion, upper: FirmwareVersion) -> 'VersionKey':
        return cls(KeyKind.RANGE, lower, upper)

    @classmethod
    def any(cls) -> 'VersionKey':
        return cls(KeyKind.ANY, _LOWEST, _HIGHEST)

    def matches(self, version: FirmwareVersion) -> bool:
        return self.lower <= version <= self.upper

    @property
    def span(self) -> int:
        """Number of versions covered; ranks overlapping ranges."""
        first = self.lower.major * (VERSION_COMPONENT_MAX + 1) + self.lower.minor
        last = self.upper.major * (VERSION_COMPONENT_MAX + 1) + self.upper.minor
        return last - first + 1

    def __str__(self):
        if self.kind is KeyKind.EXACT:
            return f"{self.lower}"
        if self.kind is KeyKind.MAJOR:
            return f"{self.lower.major}.*"
        if self.kind is KeyKind.RANGE:
            return f"{self.lower}..{self.upper}"
        return "*"


@dataclass(frozen=True)
class ParameterRecord:
    """One parameter set of the configuration, with its parsed version key."""

    index: int
    key: VersionKey
    body: ConfigValue

    @property
    def path(self) -> str:
        return self.body.path

    def precedence(self) -> Tuple[int, int, int]:
        # Sort key: most specific kind, then narrowest interval, then document order
        return (-int(self.key.kind), self.key.span, self.index)


def _version_component(value: ConfigValue) -> int:
    number = value.as_int()
    if not 0 <= number <= VERSION_COMPONENT_MAX:
        raise ConfigMalformed(value.path, f"version number {number} outside 0..{VERSION_COMPONENT_MAX}")
    return number


def _range_bound(value: Optional[ConfigValue], path: str) -> FirmwareVersion:
    if value is None:
        raise ConfigMalformed(path, "missing range bound, expected [major, minor]")
    elements = value.elements()
    if len(elements) != 2:
        raise ConfigMalformed(value.path, f"expected [major, minor], got {len(elements)} values")
    return FirmwareVersion(_version_component(elements[0]), _version_component(elements[1]))


def parse_version_key(body: ConfigValue) -> VersionKey:
    """Read the version selector fields of a parameter set body."""
    major = body.get('major_version')
    minor = body.get('minor_version')
    version_range = body.get('version_range')

    if version_range is not None:
        if major is not None or minor is not None:
            raise ConfigMalformed(version_range.path,
                                  "version_range cannot be combined with major_version/minor_version")
        version_range.require(ValueType.RECORD)
        lower = _range_bound(version_range.get('min'), f"{version_range.path}.min")
        upper = _range_bound(version_range.get('max'), f"{version_range.path}.max")
        if lower > upper:
            raise ConfigMalformed(version_range.path, f"min {lower} is greater than max {upper}")
        return VersionKey.range(lower, upper)

    if major is None:
        if minor is not None:
            raise ConfigMalformed(minor.path, "minor_version given without major_version")
        return VersionKey.any()

    major_number = _version_component(major)
    if minor is None:
        return VersionKey.major_only(major_number)
    return VersionKey.exact(FirmwareVersion(major_number, _version_component(minor)))


class ParameterTable:
    """
    Immutable table of version-keyed parameter sets.

    Matching policy for a requested firmware version:
      1. only records whose key covers the version are candidates
      2. exact major.minor beats major-only, which beats a range, which beats
         a record without any version fields
      3. between ranges the narrowest one wins
      4. remaining ties go to the record listed first

    Exactly one record is used; records are never merged.
    """

    def __init__(self, records: List[ParameterRecord], issues: Tuple[ConfigError, ...] = ()):
        self._records = tuple(records)
        self._issues = tuple(issues)

    @classmethod
    def from_config(cls, raw: Any, logger=None, section: str = VERSIONS_SECTION) -> 'ParameterTable':
        """
        Build the table from the raw VERSIONS_PARAMETERS value.

        Raises ConfigNotFound when the section is missing and ConfigMalformed
        when it is not a list. Individual bad records are reported, logged and
        skipped.
        """
        logger = logger or logging.getLogger(__name__)
        if raw is None:
            raise ConfigNotFound(section, "no parameter sets configured")

        if not isinstance(raw, (list, tuple)):
            raise ConfigMalformed(section, f"expected a list of parameter sets, got {type(raw).__name__}")

        records = []
        issues = []
        seen_keys = {}
        for index, item in enumerate(raw):
            try:
                entry = ConfigValue.from_raw(item, f"{section}[{index}]")
                body = entry.require(ValueType.RECORD)
                if 'parameter_set' in body.keys():
                    body = entry.get('parameter_set')
                    if body is None:
                        raise ConfigMalformed(f"{entry.path}.parameter_set", "empty parameter set")
                    body.require(ValueType.RECORD)
                key = parse_version_key(body)
                if key in seen_keys:
                    raise ConfigMalformed(entry.path,
                                          f"duplicate parameter set for version {key}, "
                                          f"already defined by {seen_keys[key]}")
            except ConfigMalformed as e:
                logger.warning(f"Skipping parameter set: {e}")
                issues.append(e)
                continue
            seen_keys[key] = entry.path
            logger.debug(f"Parameter set {entry.path} applies to firmware {key}")
            records.append(ParameterRecord(index, key, body))

        return cls(records, tuple(issues))

    @property
    def records(self) -> Tuple[ParameterRecord, ...]:
        return self._records

    @property
    def issues(self) -> Tuple[ConfigError, ...]:
        return self._issues

    def __len__(self):
        return len(self._records)

    def candidates(self, version: FirmwareVersion) -> List[ParameterRecord]:
        """All records covering the version, best match first."""
        matching = [record for record in self._records if record.key.matches(version)]
        return sorted(matching, key=ParameterRecord.precedence)

    def match(self, version: FirmwareVersion) -> Optional[ParameterRecord]:
        candidates = self.candidates(version)
        return candidates[0] if candidates else None
