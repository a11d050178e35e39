import asyncio

import pytest

from mockinterview.core.errors import DevicePermissionError
from mockinterview.core.recording import RecordingStateMachine
from mockinterview.models.monitoring import IncidentCategory, RecordingState
from mockinterview.sensors.client_stream import ClientMediaStream, ClientTranscriptionStream

from fakes import EventLog, FakeJudge, fast_settings, make_progress, wait_for


def build_room(store, max_frame_age: float = 2.0, judge=None):
    """A recorder wired to the same adapters the WebSocket endpoint uses."""
    events = EventLog()
    media = ClientMediaStream(max_frame_age=max_frame_age)
    media.report_permission(True)
    transcription = ClientTranscriptionStream(send=events)
    machine = RecordingStateMachine(
        progress=make_progress(),
        transcription=transcription,
        media=media,
        judge=judge or FakeJudge(),
        store=store,
        settings=fast_settings(autosave_interval_seconds=60),
        emit=events,
    )
    return machine, transcription, media, events


# ============================================================================
# MEDIA STREAM
# ============================================================================

@pytest.mark.asyncio
async def test_media_stream_serves_latest_readings_once_open():
    media = ClientMediaStream()
    media.push_frame("early")
    assert await media.capture_frame() is None

    media.report_permission(True)
    await media.open()
    media.push_frame("frame-1")
    media.push_frame("frame-2")
    media.push_audio_level(bins=[80, 100])

    assert await media.capture_frame() == "frame-2"
    assert await media.sample_loudness() == 90.0

    await media.close()
    await media.close()
    assert media.close_count == 1
    assert await media.capture_frame() is None


@pytest.mark.asyncio
async def test_loudness_reading_is_consumed_by_one_sample():
    media = ClientMediaStream()
    media.report_permission(True)
    await media.open()

    media.push_audio_level(level=120.0)

    assert await media.sample_loudness() == 120.0
    assert await media.sample_loudness() is None


@pytest.mark.asyncio
async def test_frames_expire_after_max_age():
    media = ClientMediaStream(max_frame_age=0.02)
    media.report_permission(True)
    await media.open()

    media.push_frame("frame-1")
    assert await media.capture_frame() == "frame-1"

    await asyncio.sleep(0.05)
    assert await media.capture_frame() is None

    media.push_frame("frame-2")
    assert await media.capture_frame() == "frame-2"


@pytest.mark.asyncio
async def test_media_stream_denied_or_missing_permission():
    denied = ClientMediaStream()
    denied.report_permission(False, "NotAllowedError")
    with pytest.raises(DevicePermissionError, match="NotAllowedError"):
        await denied.open()

    silent = ClientMediaStream(permission_timeout=0.01)
    with pytest.raises(DevicePermissionError):
        await silent.open()
    assert not silent.is_open


# ============================================================================
# TRANSCRIPTION STREAM
# ============================================================================

@pytest.mark.asyncio
async def test_transcription_stream_relays_commands_and_results():
    sent = EventLog()
    results, ends, errors = [], [], []

    async def on_result(event):
        results.append(event)

    async def on_end():
        ends.append(True)

    async def on_error(error):
        errors.append(error.code)

    stream = ClientTranscriptionStream(send=sent)
    stream.bind(on_result, on_end, on_error)

    await stream.feed_result(["dropped"])
    assert results == []

    await stream.start()
    await stream.start()
    assert sent.events == [{"type": "transcription", "action": "start", "stream": 1}]

    await stream.feed_result(["hello "], "wor")
    await stream.feed_error("network")
    assert results[0].final_segments == ["hello "]
    assert results[0].interim == "wor"
    assert errors == ["network"]

    await stream.feed_end()
    assert ends == [True]
    assert not stream.is_active

    await stream.stop()
    assert sent.events[-1]["action"] == "start"


@pytest.mark.asyncio
async def test_stopped_stream_drains_until_it_ends():
    sent = EventLog()
    results, ends, errors = [], [], []

    async def on_result(event):
        results.append(event.final_segments)

    async def on_end():
        ends.append(True)

    async def on_error(error):
        errors.append(error.code)

    stream = ClientTranscriptionStream(send=sent)
    stream.bind(on_result, on_end, on_error)

    await stream.start()
    await stream.stop()
    assert sent.events[-1] == {"type": "transcription", "action": "stop", "stream": 1}
    assert stream.is_draining

    await stream.feed_result(["late words"])
    await stream.feed_error("aborted")
    assert results == [["late words"]]
    assert errors == []

    await stream.feed_end()
    assert ends == [True]
    assert not stream.is_draining

    await stream.feed_result(["after end"])
    assert results == [["late words"]]


@pytest.mark.asyncio
async def test_new_stream_supersedes_a_draining_one():
    results = []

    async def on_result(event):
        results.append(event.final_segments)

    async def ignore(*args):
        return None

    stream = ClientTranscriptionStream(send=EventLog())
    stream.bind(on_result, ignore, ignore)

    await stream.start()
    await stream.stop()
    await stream.start()

    await stream.feed_result(["old"], stream=1)
    await stream.feed_result(["new"], stream=2)

    assert results == [["new"]]
    assert not stream.is_draining


# ============================================================================
# RECORDER WITH CLIENT ADAPTERS
# ============================================================================

@pytest.mark.asyncio
async def test_words_finalized_after_pause_join_the_answer(store):
    machine, transcription, _, _ = build_room(store)
    await machine.open()
    await machine.start()

    await transcription.feed_result(["hello"], "wor")
    await machine.pause()
    await transcription.feed_result(["world"])

    assert machine.progress.answers[0] == "hello world"
    assert machine.transcript.display_text == "hello world"

    await transcription.feed_end()
    await transcription.feed_result(["too late"])
    assert machine.progress.answers[0] == "hello world"
    assert machine.state == RecordingState.PAUSED
    await machine.close()


@pytest.mark.asyncio
async def test_words_finalized_after_next_go_to_the_previous_question(store):
    machine, transcription, _, _ = build_room(store)
    await machine.open()
    await machine.start()

    await transcription.feed_result(["hello"], "wor")
    await machine.advance()
    await transcription.feed_result(["world"])
    await transcription.feed_end()

    assert machine.progress.answers[0] == "hello world"
    assert machine.progress.current_question_index == 1
    assert machine.transcript.text == ""
    assert not machine.progress.answers.get(1)

    await machine.start()
    await transcription.feed_result(["second answer"])
    assert machine.progress.answers[1] == "second answer"
    assert machine.progress.answers[0] == "hello world"
    await machine.close()


@pytest.mark.asyncio
async def test_results_from_a_superseded_stream_are_dropped(store):
    machine, transcription, _, _ = build_room(store)
    await machine.open()
    await machine.start()

    await transcription.feed_result(["one"], stream=1)
    await machine.pause()
    await machine.resume()

    await transcription.feed_result(["stale"], stream=1)
    await transcription.feed_result(["two"], stream=2)

    assert machine.progress.answers[0] == "one two"
    await machine.close()


@pytest.mark.asyncio
async def test_one_loud_reading_logs_one_incident(store):
    machine, _, media, _ = build_room(store)
    await machine.open()
    await machine.start()

    media.push_audio_level(level=200.0)
    await wait_for(lambda: machine.progress.malpractice_logs.get(0))
    await asyncio.sleep(0.1)

    incidents = machine.progress.malpractice_logs[0]
    assert len(incidents) == 1
    assert incidents[0].category == IncidentCategory.AUDIO
    await machine.close()


@pytest.mark.asyncio
async def test_stale_frame_is_not_sampled_or_judged_again(store):
    judge = FakeJudge()
    machine, _, media, _ = build_room(store, max_frame_age=0.03, judge=judge)
    await machine.open()
    await machine.start()

    media.push_frame("jpeg-bytes")
    await wait_for(lambda: machine.progress.snapshots.get(0))
    await asyncio.sleep(0.08)

    snapshots = len(machine.progress.snapshots[0])
    calls = judge.calls
    await asyncio.sleep(0.08)

    assert len(machine.progress.snapshots[0]) == snapshots
    assert judge.calls == calls
    await machine.close()
