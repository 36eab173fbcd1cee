import logging

import pytest

from pca9685_driver import (
    FrequencyOutOfRangeError,
    PCA9685,
    PCA9685Error,
    Register,
    frequency_for_prescale,
    prescale_for_frequency,
)

from conftest import FakeTransport


def test_prescale_for_400hz():
    assert prescale_for_frequency(400) == 14


def test_prescale_for_50hz():
    assert prescale_for_frequency(50) == 121


def test_frequency_for_prescale():
    assert frequency_for_prescale(14) == pytest.approx(406.9, abs=0.05)
    assert frequency_for_prescale(14) == 25000000 / (15 * 4096)


@pytest.mark.parametrize('freq', [2000, 10, 0, -50, float('nan'), float('inf')])
def test_prescale_out_of_range(freq):
    with pytest.raises(FrequencyOutOfRangeError):
        prescale_for_frequency(freq)


def test_out_of_range_error_details():
    with pytest.raises(FrequencyOutOfRangeError) as info:
        prescale_for_frequency(2000)
    assert info.value.prescale == 2
    assert info.value.frequency == 2000
    assert 'too high' in str(info.value)
    assert isinstance(info.value, ValueError)
    assert isinstance(info.value, PCA9685Error)

    with pytest.raises(FrequencyOutOfRangeError, match='too low'):
        prescale_for_frequency(10)


@pytest.mark.parametrize('prescale', range(3, 256))
def test_prescale_round_trip(prescale):
    assert prescale_for_frequency(frequency_for_prescale(prescale)) == prescale


def test_set_frequency_sequence(monkeypatch):
    sleeps = []
    monkeypatch.setattr('pca9685_driver.pca9685.time.sleep', sleeps.append)
    transport = FakeTransport({Register.MODE1: 0x21})
    pca = PCA9685(transport)

    real = pca.set_frequency(400)

    assert real == 25000000 / ((14 + 1) * 4096)
    assert real != 400
    assert transport.reads == [(bytes([Register.MODE1]), 1)]
    assert transport.frames() == [
        (Register.MODE1, 0x31),
        (Register.PRE_SCALE, 14),
        (Register.MODE1, 0x21),
        (Register.MODE1, 0xA1),
    ]
    assert sleeps == [0.005]


def test_set_frequency_clears_restart_while_sleeping(monkeypatch):
    monkeypatch.setattr('pca9685_driver.pca9685.time.sleep', lambda s: None)
    transport = FakeTransport({Register.MODE1: 0x81})
    PCA9685(transport).set_frequency(50)
    assert transport.frames()[0] == (Register.MODE1, 0x11)
    assert transport.frames()[-1] == (Register.MODE1, 0x81)


@pytest.mark.parametrize('freq', [2000, 10])
def test_set_frequency_out_of_range_stops_after_sleep(transport, freq):
    transport.registers[Register.MODE1] = 0x01
    pca = PCA9685(transport, settle_delay=0)
    with pytest.raises(FrequencyOutOfRangeError):
        pca.set_frequency(freq)
    assert transport.frames() == [(Register.MODE1, 0x11)]


def test_set_frequency_rejects_non_positive_before_bus_traffic(pca, transport):
    with pytest.raises(FrequencyOutOfRangeError):
        pca.set_frequency(0)
    assert transport.writes == []
    assert transport.reads == []


def test_set_frequency_already_asleep_warns(transport, caplog):
    transport.registers[Register.MODE1] = 0x11
    pca = PCA9685(transport, settle_delay=0)
    with caplog.at_level(logging.WARNING):
        pca.set_frequency(100)
    assert transport.frames()[-1] == (Register.MODE1, 0x91)
    assert 'asleep' in caplog.text


def test_get_frequency(transport):
    transport.registers[Register.PRE_SCALE] = 121
    pca = PCA9685(transport)
    assert pca.get_frequency() == pytest.approx(50.0, abs=0.5)
    assert transport.reads == [(bytes([Register.PRE_SCALE]), 1)]


@pytest.mark.parametrize('freq', [float('nan'), float('inf'), -float('inf')])
def test_set_frequency_rejects_non_finite_before_bus_traffic(pca, transport, freq):
    with pytest.raises(PCA9685Error):
        pca.set_frequency(freq)
    assert transport.writes == []
    assert transport.reads == []
