"""
Bus transports for the PCA9685 driver.

A transport only moves bytes. It knows the device's bus address but
nothing about its registers.
"""

import logging
from abc import ABC, abstractmethod

from smbus2 import SMBus, i2c_msg

PCA9685_ADDRESS = 0x40

logger = logging.getLogger(__name__)


class Transport(ABC):

    @abstractmethod
    def write(self, data):
        """Send `data` (register address first) to the device."""

    @abstractmethod
    def write_then_read(self, data, length):
        """Send `data`, then read back exactly `length` bytes."""

    def close(self):
        pass


class SMBusTransport(Transport):
    """
    I2C transport over the Linux i2c-dev interface.

    Both operations go through a single i2c_rdwr call, so a register read
    is a combined write/read transaction with a repeated start.
    """

    def __init__(self, bus=1, address=PCA9685_ADDRESS):
        self.address = address
        self.bus = SMBus(bus)
        logger.info(f"Opened I2C bus {bus} for device 0x{address:02X}")

    def write(self, data):
        self.bus.i2c_rdwr(i2c_msg.write(self.address, list(data)))

    def write_then_read(self, data, length):
        write = i2c_msg.write(self.address, list(data))
        read = i2c_msg.read(self.address, length)
        self.bus.i2c_rdwr(write, read)
        return bytes(list(read))

    def close(self):
        self.bus.close()
