'''
Submodule containing types and type aliases used throughout the library.

Splitting these definitions into a seperate submodule allows for detailed
explanations and verbose type definitions, without cluttering up the rest
of the library.
'''
from enum import Enum, IntEnum

IntPercentage = int
'''
An integer between 0 and 100 (inclusive) that represents a brightness level.
Other than the implied bounds, this is just a normal integer.

Percentages are always derived from a raw value and never stored, see
`.helpers.percent_of`.
'''

RawValue = int
'''
A hardware scaled brightness value between 0 and the device's `max_brightness`
(inclusive). The scale differs from one device to the next, so a raw value
means nothing without the maximum it belongs to.
'''

DeviceIdentifier = str
'''
The name of a light's directory under its sysfs class root,
eg: `intel_backlight`, `nvidia_0` or `input3::capslock`.
'''


class DeviceKind(Enum):
    '''Which sysfs class a light was discovered under'''
    BACKLIGHT = 'backlight'
    LED = 'led'


class PriorityTier(IntEnum):
    '''
    Ordering used to pick the default light on machines with more than one.

    Lower values sort first. On hybrid GPU laptops the integrated GPU is almost
    always the one wired to the panel, the `acpi_video*` interfaces are generic
    fallbacks and LEDs are never the "screen".
    '''
    INTEGRATED_GPU = 0
    DEDICATED_GPU = 1
    ACPI_VIDEO = 2
    LED = 3
    UNKNOWN = 4
