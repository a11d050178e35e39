import pytest

from mockinterview.core.errors import EvaluationError, QuestionGenerationError
from mockinterview.core.interview_orchestrator import InterviewOrchestrator
from mockinterview.models.monitoring import MalpracticeIncident, RecordingState
from mockinterview.models.session import InterviewConfig

from fakes import EventLog, FakeAI, FakeJudge, FakeMedia, FakeTranscription, make_progress, make_settings


CONFIG = InterviewConfig(role="Frontend Engineer", difficulty="Junior")


def build(store, ai=None):
    ai = ai or FakeAI()
    return InterviewOrchestrator(ai_reasoning=ai, store=store, settings=make_settings()), ai


async def run_interview(orchestrator, session_id, answers):
    transcription = FakeTranscription()
    events = EventLog()
    machine = orchestrator.attach_monitor(
        session_id,
        transcription=transcription,
        media=FakeMedia(),
        emit=events,
        judge=FakeJudge(),
    )
    await machine.open()
    bundle = None
    for answer in answers:
        await machine.start()
        await transcription.result([answer])
        bundle = await machine.advance()
    return machine, events, bundle


@pytest.mark.asyncio
async def test_create_session_discards_existing_draft(store):
    await store.save_draft(make_progress().to_draft())
    orchestrator, _ = build(store)

    session = await orchestrator.create_session(CONFIG)

    assert await store.load_draft() is None
    assert session.questions == FakeAI().questions
    assert orchestrator.get_progress(session.session_id).current_question_index == 0


@pytest.mark.asyncio
async def test_create_session_without_questions_fails(store):
    orchestrator, _ = build(store, ai=FakeAI(questions=[]))

    with pytest.raises(QuestionGenerationError):
        await orchestrator.create_session(CONFIG)


@pytest.mark.asyncio
async def test_completed_interview_is_scored_and_stored(store):
    orchestrator, ai = build(store)
    session = await orchestrator.create_session(CONFIG)

    machine, events, bundle = await run_interview(
        orchestrator, session.session_id, ["one", "two", "three"]
    )

    assert bundle.answers == ["one", "two", "three"]
    assert ai.evaluated == [bundle]

    stored = await orchestrator.get_past_session(session.session_id)
    assert stored.answers == ["one", "two", "three"]
    assert stored.evaluation.overall_score == 7
    assert await store.load_draft() is None
    assert orchestrator.get_progress(session.session_id) is None

    complete = events.of_type("complete")
    assert complete == [{"type": "complete", "session_id": session.session_id, "overall_score": 7}]
    await orchestrator.detach_monitor(session.session_id)


@pytest.mark.asyncio
async def test_visual_incident_lowers_stored_score(store):
    orchestrator, _ = build(store)
    session = await orchestrator.create_session(CONFIG)
    progress = orchestrator.get_progress(session.session_id)

    transcription = FakeTranscription()
    machine = orchestrator.attach_monitor(
        session.session_id, transcription=transcription, media=FakeMedia(), judge=FakeJudge()
    )
    await machine.open()
    await machine.start()
    progress.log_incident(0, MalpracticeIncident.visual("Phone visible"))
    for _ in progress.session.questions:
        await machine.advance()

    stored = await orchestrator.get_past_session(session.session_id)
    assert stored.evaluation.overall_score == 6
    await orchestrator.detach_monitor(session.session_id)


@pytest.mark.asyncio
async def test_failed_evaluation_discards_session_but_keeps_draft(store):
    ai = FakeAI()
    ai.fail_evaluation = True
    orchestrator, _ = build(store, ai=ai)
    session = await orchestrator.create_session(CONFIG)

    transcription = FakeTranscription()
    machine = orchestrator.attach_monitor(
        session.session_id, transcription=transcription, media=FakeMedia(), judge=FakeJudge()
    )
    await machine.open()
    await machine.advance()
    await machine.advance()
    await machine.save_draft()

    with pytest.raises(EvaluationError):
        await machine.advance()

    assert await orchestrator.list_sessions() == []
    assert orchestrator.get_progress(session.session_id) is None
    assert await orchestrator.load_draft() is not None
    await orchestrator.detach_monitor(session.session_id)


@pytest.mark.asyncio
async def test_resume_draft_starts_idle_at_saved_question(store):
    progress = make_progress()
    progress.set_answer(0, "saved")
    progress.advance_question()
    await store.save_draft(progress.to_draft())
    orchestrator, _ = build(store)

    resumed = await orchestrator.resume_draft()

    assert resumed.current_question_index == 1
    assert resumed.answers == {0: "saved"}

    machine = orchestrator.attach_monitor(
        resumed.session.session_id,
        transcription=FakeTranscription(),
        media=FakeMedia(),
        judge=FakeJudge(),
    )
    assert machine.state == RecordingState.IDLE
    await orchestrator.detach_monitor(resumed.session.session_id)


@pytest.mark.asyncio
async def test_resume_without_draft_returns_none(store):
    orchestrator, _ = build(store)

    assert await orchestrator.resume_draft() is None


@pytest.mark.asyncio
async def test_attach_requires_active_session(store):
    orchestrator, _ = build(store)

    with pytest.raises(KeyError):
        orchestrator.attach_monitor("missing", transcription=FakeTranscription(), media=FakeMedia())


@pytest.mark.asyncio
async def test_discard_draft(store):
    await store.save_draft(make_progress().to_draft())
    orchestrator, _ = build(store)
    await orchestrator.resume_draft()

    assert await orchestrator.discard_draft() is True
    assert await orchestrator.load_draft() is None


@pytest.mark.asyncio
async def test_sessions_created_back_to_back_get_distinct_ids(store):
    orchestrator, _ = build(store)

    first = await orchestrator.create_session(CONFIG)
    second = await orchestrator.create_session(CONFIG)

    assert first.session_id != second.session_id
    assert orchestrator.get_progress(first.session_id).session.session_id == first.session_id
    assert orchestrator.get_progress(second.session_id).session.session_id == second.session_id
