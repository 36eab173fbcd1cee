"""PCA9685 register addresses and bit masks."""

from enum import IntEnum

NUM_CHANNELS = 16

# Channel registers are laid out in blocks of four starting at LED0_ON_L
CHAN0_ON_L = 0x06

_FIXED = [
    ('MODE1', 0x00),
    ('MODE2', 0x01),
    ('SUBADR1', 0x02),
    ('SUBADR2', 0x03),
    ('SUBADR3', 0x04),
    ('ALLCALLADR', 0x05),
    ('ALL_CHAN_ON_L', 0xFA),
    ('ALL_CHAN_ON_H', 0xFB),
    ('ALL_CHAN_OFF_L', 0xFC),
    ('ALL_CHAN_OFF_H', 0xFD),
    ('PRE_SCALE', 0xFE),
    ('TEST_MODE', 0xFF),
]


class ChannelRole(IntEnum):
    """Offset of each sub-register inside a channel's four-register block."""
    ON_L = 0
    ON_H = 1
    OFF_L = 2
    OFF_H = 3


def _channel_entries():
    for n in range(NUM_CHANNELS):
        for role in ChannelRole:
            yield f'CHAN{n}_{role.name}', CHAN0_ON_L + 4 * n + role


Register = IntEnum('Register', _FIXED + list(_channel_entries()), module=__name__)
Register.__doc__ = 'Every addressable PCA9685 register, by datasheet name.'


def channel_register(channel, role):
    """Return the Register for sub-register `role` of `channel` (0..15)."""
    if not 0 <= channel < NUM_CHANNELS:
        raise ValueError(f"Channel out of range (0..{NUM_CHANNELS - 1}): {channel}")
    return Register(CHAN0_ON_L + 4 * channel + ChannelRole(role))


# MODE1 bits
RESTART = 0x80
EXTCLK = 0x40
AI = 0x20
SLEEP = 0x10
SUB1 = 0x08
SUB2 = 0x04
SUB3 = 0x02
ALLCALL = 0x01

# MODE2 bits
INVRT = 0x10
OCH = 0x08
OUTDRV = 0x04

# Bit 4 of LEDn_ON_H / LEDn_OFF_H
FULL_ON_OFF = 0x10

MODE1_DEFAULT = ALLCALL
MODE2_DEFAULT = OUTDRV
