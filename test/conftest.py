import pytest

from svh_driver.drivers.channels import SVH_DIMENSION


def settings_list(base, count=SVH_DIMENSION):
    """One coefficient list per channel, offset by the channel index."""
    return [[base + channel, base + channel + 0.5] for channel in range(count)]


@pytest.fixture
def versions_parameters():
    return [
        {'parameter_set': {
            'position_settings': settings_list(100.0),
        }},
        {'parameter_set': {
            'major_version': 1,
            'current_settings': settings_list(10.0),
        }},
        {'parameter_set': {
            'major_version': 1,
            'minor_version': 2,
            'current_settings': {'INDEX_FINGER_PROXIMAL': [1.0, 2.0, 0.5]},
        }},
        {'parameter_set': {
            'version_range': {'min': [2, 0], 'max': [4, 0]},
            'home_settings': settings_list(20.0),
        }},
        {'parameter_set': {
            'version_range': {'min': [3, 0], 'max': [3, 9]},
            'home_settings': settings_list(30.0),
        }},
    ]
