from mockinterview.core.loudness import LoudnessMonitor, average_level
from mockinterview.models.monitoring import LOUD_NOISE_MESSAGE, IncidentCategory


def test_sample_above_threshold_is_an_audio_incident():
    monitor = LoudnessMonitor(threshold=85)

    incident = monitor.check(85.5)

    assert incident is not None
    assert incident.category == IncidentCategory.AUDIO
    assert incident.message == LOUD_NOISE_MESSAGE


def test_sample_at_threshold_is_not_loud():
    monitor = LoudnessMonitor(threshold=85)

    assert monitor.check(85) is None
    assert monitor.check(None) is None


def test_average_level_of_frequency_bins():
    assert average_level([]) == 0.0
    assert average_level([80, 90]) == 85.0
    assert average_level([255] * 4) == 255.0
