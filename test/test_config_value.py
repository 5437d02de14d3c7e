import datetime

import pytest

from svh_driver.parameters.config_value import ConfigValue, ValueType
from svh_driver.parameters.errors import ConfigMalformed


def test_scalar_types_are_tagged():
    assert ConfigValue.from_raw(None, 'x').type is ValueType.NULL
    assert ConfigValue.from_raw(True, 'x').type is ValueType.BOOL
    assert ConfigValue.from_raw(3, 'x').type is ValueType.INT
    assert ConfigValue.from_raw(3.5, 'x').type is ValueType.FLOAT
    assert ConfigValue.from_raw('abc', 'x').type is ValueType.STRING


def test_nested_paths():
    value = ConfigValue.from_raw({'current_settings': [[1, 2], None]}, 'root')
    current = value.get('current_settings')
    assert current.path == 'root.current_settings'
    assert current.elements()[0].elements()[1].path == 'root.current_settings[0][1]'
    assert current.elements()[1].is_null


def test_get_treats_null_as_absent():
    value = ConfigValue.from_raw({'minor_version': None}, 'root')
    assert value.get('minor_version') is None
    assert value.get('missing') is None


def test_float_list_accepts_ints_and_floats():
    value = ConfigValue.from_raw([1, 2.5, -3], 'entry')
    assert value.as_float_list() == (1.0, 2.5, -3.0)
    assert all(isinstance(v, float) for v in value.as_float_list())


@pytest.mark.parametrize('raw', [
    [1.0, 'two'],
    [1.0, True],
    [1.0, [2.0]],
    [1.0, {'a': 1}],
    [1.0, None],
    [float('nan')],
])
def test_float_list_rejects_non_numeric(raw):
    with pytest.raises(ConfigMalformed) as excinfo:
        ConfigValue.from_raw(raw, 'entry').as_float_list()
    assert excinfo.value.field.startswith('entry[')


def test_float_list_rejects_empty():
    with pytest.raises(ConfigMalformed) as excinfo:
        ConfigValue.from_raw([], 'entry').as_float_list()
    assert excinfo.value.field == 'entry'


def test_as_int_rejects_bool_and_float():
    with pytest.raises(ConfigMalformed):
        ConfigValue.from_raw(True, 'major_version').as_int()
    with pytest.raises(ConfigMalformed):
        ConfigValue.from_raw(1.0, 'major_version').as_int()


def test_unsupported_type_is_rejected_on_access():
    value = ConfigValue.from_raw({'when': datetime.date(2024, 1, 1), 'blob': b'\x00'}, 'root')
    when = value.get('when')
    assert when.type is ValueType.UNSUPPORTED
    assert value.get('blob').type is ValueType.UNSUPPORTED
    with pytest.raises(ConfigMalformed) as excinfo:
        when.as_float()
    assert excinfo.value.field == 'root.when'
    assert 'date' in excinfo.value.message


def test_to_raw():
    raw = {'a': [1, 2.0, None], 'b': {'c': 'd'}}
    assert ConfigValue.from_raw(raw, 'root').to_raw() == raw
