import asyncio

import pytest

from core.debounce import Debouncer, ValidationDebouncer
from core.goal_service import GoalDraft


def test_only_last_submission_runs():
    calls = []

    async def scenario():
        debouncer = Debouncer(0.02)
        first = debouncer.submit(calls.append, "a")
        second = debouncer.submit(calls.append, "b")
        last = debouncer.submit(calls.append, "c")
        await last
        return first, second

    first, second = asyncio.run(scenario())
    assert calls == ["c"]
    assert first.cancelled()
    assert second.cancelled()


def test_superseded_future_raises_cancelled():
    async def scenario():
        debouncer = Debouncer(0.02)
        stale = debouncer.submit(lambda: "old")
        debouncer.submit(lambda: "new")
        with pytest.raises(asyncio.CancelledError):
            await stale

    asyncio.run(scenario())


def test_async_callables_are_awaited():
    async def double(value):
        return value * 2

    async def scenario():
        debouncer = Debouncer(0.001)
        return await debouncer.submit(double, 21)

    assert asyncio.run(scenario()) == 42


def test_cancel_drops_pending_call():
    calls = []

    async def scenario():
        debouncer = Debouncer(0.01)
        debouncer.submit(calls.append, "x")
        assert debouncer.pending
        debouncer.cancel()
        assert not debouncer.pending
        await asyncio.sleep(0.03)

    asyncio.run(scenario())
    assert calls == []


def test_validation_debouncer_skips_unchanged_drafts():
    seen = []

    def evaluate(draft):
        seen.append(draft.title)
        return f"feedback for {draft.title}"

    async def scenario():
        debouncer = ValidationDebouncer(evaluate, delay_seconds=0.001)
        draft = GoalDraft(title="Reducir costos", description="Operación")
        first = await debouncer.submit(draft)
        again = await debouncer.submit(GoalDraft(title="Reducir costos", description="Operación"))
        edited = await debouncer.submit(GoalDraft(title="Reducir costos 10%", description="Operación"))
        return debouncer, first, again, edited

    debouncer, first, again, edited = asyncio.run(scenario())
    assert seen == ["Reducir costos", "Reducir costos 10%"]
    assert first == again == "feedback for Reducir costos"
    assert edited == "feedback for Reducir costos 10%"
    assert debouncer.evaluations == 2
    assert debouncer.last_feedback == edited


def test_validation_debouncer_with_goal_service(context):
    user = context.organization.get_user("user-7")

    async def scenario():
        debouncer = ValidationDebouncer(
            lambda draft: context.goal_service.preview(draft, user),
            delay_seconds=context.config.VALIDATION_DEBOUNCE_SECONDS,
        )
        debouncer.submit(GoalDraft(title="Incre", description="x"))
        return await debouncer.submit(
            GoalDraft(title="Incrementar ventas del norte", description="Nuevas cuentas")
        )

    feedback = asyncio.run(scenario())
    assert feedback is not None
    assert feedback.breakdown["S"].score >= 8
