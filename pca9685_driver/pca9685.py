"""
Driver for the PCA9685 16-channel, 12-bit PWM controller.

Usage:
    with open_pca9685() as pca:
        pca.set_frequency(400)
        pca.set_channel_value(10, 1024)               # 25% duty on channel 10
        pca.set_channel_full_value(10, 1024, 3192)    # on at 1024, off at 3192
"""

import logging
import math
import time

from .config import PCA9685Config, SETTLE_DELAY
from .exceptions import FrequencyOutOfRangeError
from .registers import (
    FULL_ON_OFF,
    MODE1_DEFAULT,
    MODE2_DEFAULT,
    RESTART,
    SLEEP,
    ChannelRole,
    Register,
    channel_register,
)
from .transport import SMBusTransport

OSCILLATOR_HZ = 25000000  # 25 MHz internal oscillator
COUNTER_STEPS = 4096      # 12-bit counter

PRESCALE_MIN = 3
PRESCALE_MAX = 255


def _check_frequency(freq):
    if not math.isfinite(freq) or freq <= 0:
        raise FrequencyOutOfRangeError(
            f"PWM frequency must be a positive number, got {freq}", frequency=freq)


def prescale_for_frequency(freq):
    """
    Prescaler divisor for a target PWM frequency:

      prescale = round(25e6 / (4096 * freq)) - 1

    rounding half up. Raises FrequencyOutOfRangeError when the result is
    outside the chip's legal range of 3..255.
    """
    _check_frequency(freq)
    prescale = int(OSCILLATOR_HZ / (COUNTER_STEPS * freq) + 0.5) - 1
    if prescale < PRESCALE_MIN:
        raise FrequencyOutOfRangeError(
            f"Requested frequency {freq} Hz too high: prescaler must be >= {PRESCALE_MIN} "
            f"(max {frequency_for_prescale(PRESCALE_MIN):.0f} Hz)",
            frequency=freq, prescale=prescale)
    if prescale > PRESCALE_MAX:
        raise FrequencyOutOfRangeError(
            f"Requested frequency {freq} Hz too low: prescaler must be <= {PRESCALE_MAX} "
            f"(min {frequency_for_prescale(PRESCALE_MAX):.0f} Hz)",
            frequency=freq, prescale=prescale)
    return prescale


def frequency_for_prescale(prescale):
    """PWM frequency the chip actually produces for a prescaler divisor."""
    return OSCILLATOR_HZ / ((prescale + 1) * COUNTER_STEPS)


def _split(value):
    """Split a 12-bit counter value into its (high nibble, low byte)."""
    value = int(value)
    return (value & 0x0F00) >> 8, value & 0xFF


class PCA9685:
    """
    Register-level PCA9685 driver on top of a Transport.

    Not thread safe: multi-step sequences such as set_frequency must not
    be interleaved with other writes to the same chip.
    """

    def __init__(self, transport, settle_delay=SETTLE_DELAY, logger=None):
        self.transport = transport
        self.settle_delay = settle_delay
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    # ---------- Register access ----------
    def write_register(self, register, *values):
        """Write one or more bytes starting at `register`."""
        if not values:
            raise ValueError(f"No data to write to {Register(register).name}")
        for value in values:
            if not 0 <= value <= 0xFF:
                raise ValueError(f"Byte out of range for {Register(register).name}: {value}")
        frame = bytes([register, *values])
        self.logger.debug("write %r: %s", Register(register), frame[1:].hex(" "))
        self.transport.write(frame)

    def read_register(self, register):
        """Read a single byte from `register`."""
        data = self.transport.write_then_read(bytes([register]), 1)
        value = data[0]
        self.logger.debug("read %r: 0x%02X", Register(register), value)
        return value

    # ---------- Channel output ----------
    def set_channel_full_value(self, channel, on_time, off_time):
        """
        Set the counter values (0..4095) at which `channel` turns on and off.

        High bytes go out first so the chip never pairs a new low byte with
        a stale high byte mid-update.
        """
        on_h, on_l = _split(on_time)
        off_h, off_l = _split(off_time)
        self.write_register(channel_register(channel, ChannelRole.ON_H), on_h)
        self.write_register(channel_register(channel, ChannelRole.OFF_H), off_h)
        self.write_register(channel_register(channel, ChannelRole.ON_L), on_l)
        self.write_register(channel_register(channel, ChannelRole.OFF_L), off_l)

    def set_channel_value(self, channel, time_on, offset=0):
        """
        Set a channel's duty from a single value 0..4095.

        The channel turns on at `offset` and off `time_on` counts later.
        Staggering offsets across channels spreads out switching current;
        any offset is accepted and wrapped to the counter range.
        """
        if time_on < 0 or time_on >= COUNTER_STEPS:
            time_on = COUNTER_STEPS - 1 if time_on >= COUNTER_STEPS else 0
            self.logger.warning(f"Channel value outside allowed range, clamping: channel {channel}, value {time_on}")

        offset %= COUNTER_STEPS
        off_time = (time_on + offset) % COUNTER_STEPS
        self.set_channel_full_value(channel, offset, off_time)

    def set_channel_on(self, channel):
        """Drive `channel` fully on."""
        self.write_register(channel_register(channel, ChannelRole.ON_H), FULL_ON_OFF)
        self.write_register(channel_register(channel, ChannelRole.ON_L), 0x00)
        self.write_register(channel_register(channel, ChannelRole.OFF_H), 0x00)
        self.write_register(channel_register(channel, ChannelRole.OFF_L), 0x00)

    def set_channel_off(self, channel):
        """Drive `channel` fully off."""
        # Full off wins over full on, so set it before clearing the rest
        self.write_register(channel_register(channel, ChannelRole.OFF_H), FULL_ON_OFF)
        self.write_register(channel_register(channel, ChannelRole.ON_H), 0x00)
        self.write_register(channel_register(channel, ChannelRole.ON_L), 0x00)
        self.write_register(channel_register(channel, ChannelRole.OFF_L), 0x00)

    def get_channel_full_value(self, channel):
        """
        Read back (on_time, off_time) for `channel`.

        Values are 13 bits wide: bit 12 is the full on / full off flag.
        """
        on_l = self.read_register(channel_register(channel, ChannelRole.ON_L))
        on_h = self.read_register(channel_register(channel, ChannelRole.ON_H))
        off_l = self.read_register(channel_register(channel, ChannelRole.OFF_L))
        off_h = self.read_register(channel_register(channel, ChannelRole.OFF_H))
        return (on_h & 0x1F) << 8 | on_l, (off_h & 0x1F) << 8 | off_l

    def set_all_channels_full_value(self, on_time, off_time):
        """Same as set_channel_full_value, applied to every channel at once."""
        on_h, on_l = _split(on_time)
        off_h, off_l = _split(off_time)
        self.write_register(Register.ALL_CHAN_ON_H, on_h)
        self.write_register(Register.ALL_CHAN_OFF_H, off_h)
        self.write_register(Register.ALL_CHAN_ON_L, on_l)
        self.write_register(Register.ALL_CHAN_OFF_L, off_l)

    # ---------- Modes and frequency ----------
    def set_default_mode(self):
        """Put MODE1 and MODE2 back to the chip's power-on defaults."""
        self.write_register(Register.MODE1, MODE1_DEFAULT)
        self.write_register(Register.MODE2, MODE2_DEFAULT)

    def set_frequency(self, freq):
        """
        Set the PWM frequency (Hz) for all channels.

        Returns the frequency actually produced, which differs from `freq`
        because the prescaler is an integer.
        """
        # Checked up front so a bad argument causes no bus traffic
        _check_frequency(freq)

        old_mode1 = self.read_register(Register.MODE1)
        # Sleep with restart cleared; the prescaler is only writable while asleep
        new_mode1 = (old_mode1 & 0x7F) | SLEEP
        self.write_register(Register.MODE1, new_mode1)

        prescale = prescale_for_frequency(freq)

        self.write_register(Register.PRE_SCALE, prescale)
        self.write_register(Register.MODE1, old_mode1)
        time.sleep(self.settle_delay)
        self.write_register(Register.MODE1, old_mode1 | RESTART)

        if old_mode1 & SLEEP:
            self.logger.warning("MODE1 had SLEEP set before the frequency change, chip left asleep")

        real_freq = frequency_for_prescale(prescale)
        self.logger.info(f"PWM frequency set to {real_freq:.2f} Hz (requested {freq} Hz, prescale {prescale})")
        return real_freq

    def get_frequency(self):
        """Frequency currently programmed in PRE_SCALE."""
        return frequency_for_prescale(self.read_register(Register.PRE_SCALE))

    # ---------- Lifecycle ----------
    def close(self):
        self.transport.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def open_pca9685(config=None, logger=None):
    """Open the I2C bus described by `config` and return a PCA9685 on it."""
    config = config or PCA9685Config()
    transport = SMBusTransport(bus=config.bus, address=config.address)
    return PCA9685(transport, settle_delay=config.settle_delay, logger=logger)
