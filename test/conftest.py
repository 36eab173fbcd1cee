import pytest

from pca9685_driver import PCA9685, Transport


class FakeTransport(Transport):
    """Records every frame and answers reads from a register map."""

    def __init__(self, registers=None):
        self.registers = dict(registers or {})
        self.writes = []
        self.reads = []
        self.closed = False

    def write(self, data):
        data = bytes(data)
        self.writes.append(data)
        self.registers[data[0]] = data[-1]

    def write_then_read(self, data, length):
        self.reads.append((bytes(data), length))
        return bytes([self.registers.get(data[0], 0)] * length)

    def close(self):
        self.closed = True

    def frames(self):
        """Writes as (register, value) pairs."""
        return [(w[0], w[1]) for w in self.writes]


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def pca(transport):
    return PCA9685(transport, settle_delay=0)
