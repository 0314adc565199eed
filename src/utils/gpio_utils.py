"""
GPIO numbering helpers for the Raspberry Pi 40-pin header.
Maps BCM GPIO numbers to physical header pins and back.
"""

from typing import Optional

# BCM GPIO -> physical header pin (Pi 2/3/4/5, 40-pin header)
GPIO_TO_PHYSICAL = {
    0: 27,   1: 28,   2: 3,    3: 5,
    4: 7,    5: 29,   6: 31,   7: 26,
    8: 24,   9: 21,   10: 19,  11: 23,
    12: 32,  13: 33,  14: 8,   15: 10,
    16: 36,  17: 11,  18: 12,  19: 35,
    20: 38,  21: 40,  22: 15,  23: 16,
    24: 18,  25: 22,  26: 37,  27: 13
}

# Physical Pin to GPIO mapping (reverse lookup)
PHYSICAL_TO_GPIO = {v: k for k, v in GPIO_TO_PHYSICAL.items()}


def is_valid_gpio(gpio_num) -> bool:
    """True for an int (not bool) that names a header GPIO"""
    return isinstance(gpio_num, int) and not isinstance(gpio_num, bool) and gpio_num in GPIO_TO_PHYSICAL


def gpio_to_physical(gpio_num: int) -> Optional[int]:
    """Convert GPIO number to physical pin number"""
    return GPIO_TO_PHYSICAL.get(gpio_num)


def physical_to_gpio(physical_pin: int) -> Optional[int]:
    """Convert physical pin number to GPIO number"""
    return PHYSICAL_TO_GPIO.get(physical_pin)


def describe_pin(gpio_num: int) -> str:
    """Human readable "GPIO17 (pin 11)" label for log lines"""
    physical = gpio_to_physical(gpio_num)
    if physical is None:
        return f"GPIO{gpio_num} (not on header)"
    return f"GPIO{gpio_num} (pin {physical})"
