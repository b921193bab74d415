from unittest.mock import Mock

import pytest
from pytest_mock import MockerFixture

import sysfs_backlight
from sysfs_backlight import Config, Light
from sysfs_backlight.exceptions import (DeviceNotFoundError, InvalidInputError,
                                        NoSavedStateError, ParseError)
from sysfs_backlight.lock import InstanceLock

from .helpers import FakeSysfs


@pytest.fixture
def hybrid(sysfs: FakeSysfs) -> FakeSysfs:
    '''A laptop with both GPUs exposing a backlight, plus a capslock LED'''
    sysfs.add_backlight('nvidia_0', 40, 100)
    sysfs.add_backlight('intel_backlight', 9600, 19200)
    sysfs.add_led('input3::capslock', 0, 1)
    return sysfs


@pytest.fixture
def lock_spy(mocker: MockerFixture) -> Mock:
    return mocker.spy(InstanceLock, 'acquire')


class TestDiscovery:
    def test_list_lights(self, hybrid: FakeSysfs):
        names = [light.name for light in sysfs_backlight.list_lights(hybrid.config)]
        assert names == ['intel_backlight', 'nvidia_0', 'input3::capslock']

    def test_list_lights_empty(self, sysfs: FakeSysfs):
        with pytest.raises(DeviceNotFoundError, match='no qualifying lights'):
            sysfs_backlight.list_lights(sysfs.config)

    def test_list_lights_only_broken(self, sysfs: FakeSysfs):
        sysfs.add_backlight('acpi_video0', 0, 0)
        with pytest.raises(DeviceNotFoundError, match='could not be read'):
            sysfs_backlight.list_lights(sysfs.config)

    def test_scan_lights_reports_failures(self, hybrid: FakeSysfs):
        hybrid.add_backlight('acpi_video0', 'x', 10)
        result = sysfs_backlight.scan_lights(hybrid.config)
        assert len(result.lights) == 3
        assert len(result.failures) == 1

    def test_get_light_default(self, hybrid: FakeSysfs):
        assert sysfs_backlight.get_light(config=hybrid.config).name == 'intel_backlight'

    def test_get_light_by_name(self, hybrid: FakeSysfs):
        light = sysfs_backlight.get_light('nvidia_0', hybrid.config)
        assert isinstance(light, Light)
        assert light.name == 'nvidia_0'

    def test_get_light_unknown(self, hybrid: FakeSysfs):
        with pytest.raises(DeviceNotFoundError, match='acpi_video0'):
            sysfs_backlight.get_light('acpi_video0', hybrid.config)

    def test_get_light_broken(self, hybrid: FakeSysfs):
        hybrid.add_backlight('acpi_video0', 'x', 10)
        with pytest.raises(ParseError):
            sysfs_backlight.get_light('acpi_video0', hybrid.config)

    def test_get_light_nothing_found(self, sysfs: FakeSysfs):
        with pytest.raises(DeviceNotFoundError):
            sysfs_backlight.get_light(config=sysfs.config)

    def test_default_config(self, hybrid: FakeSysfs, mocker: MockerFixture):
        mocker.patch.object(Config, 'from_env', Mock(return_value=hybrid.config))
        assert sysfs_backlight.get_brightness() == 50


class TestBrightness:
    def test_get_brightness_takes_no_lock(self, hybrid: FakeSysfs, lock_spy: Mock):
        assert sysfs_backlight.get_brightness(config=hybrid.config) == 50
        assert sysfs_backlight.get_brightness('nvidia_0', hybrid.config) == 40
        lock_spy.assert_not_called()

    def test_increase(self, hybrid: FakeSysfs, lock_spy: Mock):
        assert sysfs_backlight.increase_brightness(10, config=hybrid.config) == 60
        assert hybrid.brightness('intel_backlight') == 11520
        assert hybrid.brightness('nvidia_0') == 40
        lock_spy.assert_called_once()

    def test_decrease_named_device(self, hybrid: FakeSysfs, lock_spy: Mock):
        assert sysfs_backlight.decrease_brightness(15, 'nvidia_0', config=hybrid.config) == 25
        assert hybrid.brightness('nvidia_0') == 25
        lock_spy.assert_called_once()

    def test_increase_with_sweep(self, hybrid: FakeSysfs):
        value = sysfs_backlight.increase_brightness(
            20, 'nvidia_0', sweep=True, config=hybrid.config, steps=4, delay=0)
        assert value == 60
        assert hybrid.brightness('nvidia_0') == 60

    def test_set_brightness(self, hybrid: FakeSysfs, lock_spy: Mock):
        assert sysfs_backlight.set_brightness(25, config=hybrid.config) == 25
        assert hybrid.brightness('intel_backlight') == 4800
        lock_spy.assert_called_once()

    def test_set_brightness_invalid(self, hybrid: FakeSysfs):
        with pytest.raises(InvalidInputError):
            sysfs_backlight.set_brightness(120, config=hybrid.config)
        assert hybrid.brightness('intel_backlight') == 9600

    def test_toggle_led(self, hybrid: FakeSysfs, lock_spy: Mock):
        assert sysfs_backlight.toggle('input3::capslock', hybrid.config) == 100
        assert hybrid.brightness('input3::capslock') == 1
        assert sysfs_backlight.toggle('input3::capslock', hybrid.config) == 0
        assert lock_spy.call_count == 2

    def test_write_handle_closed(self, hybrid: FakeSysfs, mocker: MockerFixture):
        close = mocker.spy(Light, 'close')
        sysfs_backlight.set_brightness(80, config=hybrid.config)
        close.assert_called_once()

    def test_lock_released(self, hybrid: FakeSysfs):
        sysfs_backlight.set_brightness(80, config=hybrid.config)
        with InstanceLock(hybrid.config.lock_file) as instance:
            assert instance.locked


class TestSaveRestore:
    def test_save_then_restore(self, hybrid: FakeSysfs, lock_spy: Mock):
        assert sysfs_backlight.save(config=hybrid.config) == 9600
        sysfs_backlight.set_brightness(100, config=hybrid.config)
        assert sysfs_backlight.restore(config=hybrid.config) == 50
        assert hybrid.brightness('intel_backlight') == 9600
        assert lock_spy.call_count == 3

    def test_devices_saved_independently(self, hybrid: FakeSysfs):
        sysfs_backlight.save(config=hybrid.config)
        sysfs_backlight.save('nvidia_0', hybrid.config)
        sysfs_backlight.set_brightness(0, 'nvidia_0', hybrid.config)
        sysfs_backlight.set_brightness(0, config=hybrid.config)

        assert sysfs_backlight.restore('nvidia_0', hybrid.config) == 40
        assert hybrid.brightness('intel_backlight') == 0

    def test_restore_without_save(self, hybrid: FakeSysfs):
        with pytest.raises(NoSavedStateError):
            sysfs_backlight.restore(config=hybrid.config)
        assert hybrid.brightness('intel_backlight') == 9600
