import pytest

from mockinterview.core.autosave import DraftAutosaveManager
from mockinterview.models.monitoring import MalpracticeIncident, RecordingState
from mockinterview.models.progress import InterviewProgress
from mockinterview.storage.session_store import SessionStore

from fakes import make_progress


def populated_progress() -> InterviewProgress:
    progress = make_progress()
    progress.set_answer(0, "first answer")
    progress.append_snapshot(0, "img-a")
    progress.append_snapshot(0, "img-b")
    progress.log_incident(0, MalpracticeIncident.loud_noise())
    progress.log_incident(0, MalpracticeIncident.visual("Phone visible"))
    progress.advance_question()
    progress.set_answer(1, "half an ans")
    progress.set_transcript("half an ans")
    return progress


@pytest.mark.asyncio
async def test_draft_round_trip_restores_all_state(store):
    progress = populated_progress()
    manager = DraftAutosaveManager(store, progress, get_state=lambda: RecordingState.PAUSED)

    assert await manager.save() is True

    draft = await store.load_draft()
    restored = InterviewProgress.from_draft(draft)

    assert restored.session == progress.session
    assert restored.current_question_index == 1
    assert restored.answers == {0: "first answer", 1: "half an ans"}
    assert restored.snapshots == {0: ["img-a", "img-b"]}
    assert restored.malpractice_logs == progress.malpractice_logs
    assert restored.current_transcript == "half an ans"


@pytest.mark.asyncio
async def test_tick_only_saves_while_recording_or_paused(store):
    state = {"value": RecordingState.IDLE}
    manager = DraftAutosaveManager(store, make_progress(), get_state=lambda: state["value"])

    await manager._tick()
    assert await store.load_draft() is None

    state["value"] = RecordingState.RECORDING
    await manager._tick()
    assert await store.load_draft() is not None


@pytest.mark.asyncio
async def test_failed_save_is_reported_not_raised(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("occupied")
    progress = populated_progress()
    version = progress.version
    manager = DraftAutosaveManager(
        SessionStore(blocker), progress, get_state=lambda: RecordingState.PAUSED
    )

    assert await manager.save() is False
    assert manager.failed_saves == 1
    assert progress.version == version
    assert progress.answers[0] == "first answer"


def test_draft_is_a_deep_copy():
    progress = populated_progress()

    draft = progress.to_draft()
    progress.append_snapshot(0, "img-c")
    progress.log_incident(1, MalpracticeIncident.loud_noise())
    progress.set_answer(1, "changed")

    assert draft.snapshots[0] == ["img-a", "img-b"]
    assert 1 not in draft.malpractice_logs
    assert draft.answers[1] == "half an ans"


@pytest.mark.asyncio
async def test_discard_removes_the_draft(store):
    manager = DraftAutosaveManager(store, make_progress(), get_state=lambda: RecordingState.PAUSED)
    await manager.save()

    assert await manager.discard() is True
    assert await store.load_draft() is None
