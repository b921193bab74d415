import pytest

from sysfs_backlight.linux import Light
from sysfs_backlight.types import DeviceKind

from .helpers import FakeSysfs


@pytest.fixture
def sysfs(tmp_path) -> FakeSysfs:
    return FakeSysfs(tmp_path)


@pytest.fixture
def light(sysfs: FakeSysfs):
    '''A backlight with a max brightness of 100, currently at 50'''
    path = sysfs.add_backlight('intel_backlight', 50, 100)
    with Light.from_path(DeviceKind.BACKLIGHT, str(path)) as light:
        yield light
