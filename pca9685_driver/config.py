import os
from dataclasses import dataclass

from .transport import PCA9685_ADDRESS

# Wait for the oscillator to stabilize after a prescale change
SETTLE_DELAY = 0.005


@dataclass(frozen=True)
class PCA9685Config:
    bus: int = 1
    address: int = PCA9685_ADDRESS
    settle_delay: float = SETTLE_DELAY

    def __post_init__(self):
        if not 0 <= self.address <= 0x7F:
            raise ValueError(f"I2C address must be 7-bit, got 0x{self.address:X}")
        if self.bus < 0:
            raise ValueError(f"Bus number must be non-negative, got {self.bus}")
        if self.settle_delay < 0:
            raise ValueError(f"Settle delay must be non-negative, got {self.settle_delay}")

    @classmethod
    def from_env(cls, prefix='PCA9685_', environ=None):
        """
        Build a config from environment variables, e.g. PCA9685_BUS=7,
        PCA9685_ADDRESS=0x41, PCA9685_SETTLE_DELAY=0.01.
        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        kwargs = {}
        if prefix + 'BUS' in env:
            kwargs['bus'] = int(env[prefix + 'BUS'], 0)
        if prefix + 'ADDRESS' in env:
            kwargs['address'] = int(env[prefix + 'ADDRESS'], 0)
        if prefix + 'SETTLE_DELAY' in env:
            kwargs['settle_delay'] = float(env[prefix + 'SETTLE_DELAY'])
        return cls(**kwargs)
