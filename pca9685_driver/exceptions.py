class PCA9685Error(Exception):
    """Base class for errors raised by the PCA9685 driver."""


class FrequencyOutOfRangeError(PCA9685Error, ValueError):
    """The requested PWM frequency cannot be reached with a legal prescaler."""

    def __init__(self, message, frequency=None, prescale=None):
        super().__init__(message)
        self.frequency = frequency
        self.prescale = prescale
