from dataclasses import dataclass

VERSION_COMPONENT_MAX = 0xFFFF


@dataclass(frozen=True, order=True)
class FirmwareVersion:
    """Firmware revision reported by the hand, ordered major first."""

    major: int
    minor: int

    def __post_init__(self):
        for name in ('major', 'minor'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{name} version must be an int, got {type(value).__name__}")
            if not 0 <= value <= VERSION_COMPONENT_MAX:
                raise ValueError(f"{name} version {value} outside 0..{VERSION_COMPONENT_MAX}")

    @property
    def is_unknown(self) -> bool:
        """0.0 is what we get when the hand did not answer the version request."""
        return self.major == 0 and self.minor == 0

    def __str__(self):
        return f"{self.major}.{self.minor}"
