"""
Debounced re-validation for goal drafts being edited.

Each keystroke-level change submits a new evaluation; only the last one
submitted within the delay window actually runs.
"""
import asyncio
from typing import Any, Awaitable, Callable, Optional

from core.goal_service import GoalDraft
from core.logger import get_logger
from core.models import SmartFeedback

logger = get_logger("debounce")


class Debouncer:
    """Run only the most recent submitted call, after a quiet period."""

    def __init__(self, delay_seconds: float = 0.5):
        self.delay_seconds = delay_seconds
        self._pending: Optional[asyncio.Task] = None

    async def _delayed(self, fn: Callable[..., Any], args: tuple) -> Any:
        await asyncio.sleep(self.delay_seconds)
        result = fn(*args)
        if asyncio.iscoroutine(result):
            result = await result
        return result

    def submit(self, fn: Callable[..., Any], *args: Any) -> "asyncio.Task":
        """
        Schedule ``fn(*args)`` after the delay and cancel whatever was still
        waiting. Must be called from a running event loop. Awaiting a
        superseded task raises ``asyncio.CancelledError``.
        """
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
            logger.debug("Superseded pending call")
        self._pending = asyncio.get_running_loop().create_task(self._delayed(fn, args))
        return self._pending

    def cancel(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    @property
    def pending(self) -> bool:
        return self._pending is not None and not self._pending.done()


class ValidationDebouncer:
    """
    Debounced draft evaluation that skips drafts identical to the last one
    validated and hands back the cached feedback instead.
    """

    def __init__(
        self,
        evaluate: Callable[[GoalDraft], Any],
        delay_seconds: float = 0.5,
    ):
        self._evaluate = evaluate
        self._debouncer = Debouncer(delay_seconds)
        self._last_fingerprint: Optional[tuple] = None
        self._last_feedback: Optional[SmartFeedback] = None
        self.evaluations = 0

    async def _run(self, draft: GoalDraft) -> Optional[SmartFeedback]:
        fingerprint = draft.fingerprint()
        if fingerprint == self._last_fingerprint:
            return self._last_feedback

        feedback = self._evaluate(draft)
        if asyncio.iscoroutine(feedback):
            feedback = await feedback
        self.evaluations += 1
        self._last_fingerprint = fingerprint
        self._last_feedback = feedback
        return feedback

    def submit(self, draft: GoalDraft) -> Awaitable[Optional[SmartFeedback]]:
        return self._debouncer.submit(self._run, draft)

    @property
    def last_feedback(self) -> Optional[SmartFeedback]:
        return self._last_feedback
