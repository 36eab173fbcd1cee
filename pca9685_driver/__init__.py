from .config import PCA9685Config
from .exceptions import FrequencyOutOfRangeError, PCA9685Error
from .pca9685 import (
    PCA9685,
    frequency_for_prescale,
    open_pca9685,
    prescale_for_frequency,
)
from .registers import ChannelRole, Register, channel_register
from .transport import SMBusTransport, Transport
