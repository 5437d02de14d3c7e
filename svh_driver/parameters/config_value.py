import math
from enum import Enum
from typing import Any, Iterator, List, Optional, Tuple

from .errors import ConfigMalformed


class ValueType(Enum):
    NULL = 'null'
    BOOL = 'bool'
    INT = 'int'
    FLOAT = 'float'
    STRING = 'string'
    ARRAY = 'array'
    RECORD = 'record'
    # dates, binary blobs, sets and other YAML tags
    UNSUPPORTED = 'unsupported'


class ConfigValue:
    """
    Typed, read-only view of one node of the raw parameter tree.

    The YAML loader hands us plain dicts, lists and scalars. Everything that
    reads the hand parameters goes through this class so that every type check
    happens in one place and every failure carries the path of the bad entry.
    """

    __slots__ = ('type', 'path', '_value')

    def __init__(self, value_type: ValueType, value: Any, path: str):
        self.type = value_type
        self.path = path
        self._value = value

    @classmethod
    def from_raw(cls, raw: Any, path: str) -> 'ConfigValue':
        # bool is a subclass of int, so it has to be checked first
        if raw is None:
            return cls(ValueType.NULL, None, path)
        if isinstance(raw, bool):
            return cls(ValueType.BOOL, raw, path)
        if isinstance(raw, int):
            return cls(ValueType.INT, raw, path)
        if isinstance(raw, float):
            return cls(ValueType.FLOAT, raw, path)
        if isinstance(raw, str):
            return cls(ValueType.STRING, raw, path)
        if isinstance(raw, (list, tuple)):
            elements = tuple(cls.from_raw(item, f"{path}[{i}]") for i, item in enumerate(raw))
            return cls(ValueType.ARRAY, elements, path)
        if isinstance(raw, dict):
            members = {key: cls.from_raw(item, f"{path}.{key}") for key, item in raw.items()}
            return cls(ValueType.RECORD, members, path)
        return cls(ValueType.UNSUPPORTED, raw, path)

    def __repr__(self):
        return f"ConfigValue({self.type.value}, {self.path})"

    @property
    def is_null(self) -> bool:
        return self.type is ValueType.NULL

    @property
    def is_numeric(self) -> bool:
        return self.type in (ValueType.INT, ValueType.FLOAT)

    @property
    def is_array(self) -> bool:
        return self.type is ValueType.ARRAY

    @property
    def is_record(self) -> bool:
        return self.type is ValueType.RECORD

    def __len__(self):
        if self.type in (ValueType.ARRAY, ValueType.RECORD):
            return len(self._value)
        raise TypeError(f"{self.type.value} value at {self.path} has no length")

    def get(self, key) -> Optional['ConfigValue']:
        """Member of a record, or None when the key is absent or set to null."""
        self.require(ValueType.RECORD)
        member = self._value.get(key)
        if member is None or member.is_null:
            return None
        return member

    def keys(self) -> List[Any]:
        self.require(ValueType.RECORD)
        return list(self._value.keys())

    def items(self) -> Iterator[Tuple[Any, 'ConfigValue']]:
        self.require(ValueType.RECORD)
        return iter(self._value.items())

    def elements(self) -> Tuple['ConfigValue', ...]:
        self.require(ValueType.ARRAY)
        return self._value

    def require(self, *allowed: ValueType) -> 'ConfigValue':
        if self.type not in allowed:
            expected = ' or '.join(value_type.value for value_type in allowed)
            got = self.type.value
            if self.type is ValueType.UNSUPPORTED:
                got = f"unsupported value of type {type(self._value).__name__}"
            raise ConfigMalformed(self.path, f"expected {expected}, got {got}")
        return self

    def as_int(self) -> int:
        return self.require(ValueType.INT)._value

    def as_str(self) -> str:
        return self.require(ValueType.STRING)._value

    def as_float(self) -> float:
        self.require(ValueType.INT, ValueType.FLOAT)
        number = float(self._value)
        if not math.isfinite(number):
            raise ConfigMalformed(self.path, f"expected a finite number, got {self._value}")
        return number

    def as_float_list(self) -> Tuple[float, ...]:
        """Convert a non-empty array of ints/floats. Any other element is an error."""
        elements = self.elements()
        if not elements:
            raise ConfigMalformed(self.path, "empty settings list, use null to leave the channel at its default")
        return tuple(element.as_float() for element in elements)

    def to_raw(self) -> Any:
        if self.type is ValueType.ARRAY:
            return [element.to_raw() for element in self._value]
        if self.type is ValueType.RECORD:
            return {key: member.to_raw() for key, member in self._value.items()}
        return self._value
