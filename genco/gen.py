"The Gen class, which owns a body and steps it one yield at a time"
from __future__ import annotations
from genco.co import Co
from genco.engine import Airlock, Next, ProtocolError, GeneratorCompleted, Step, advance, async_advance
from genco.ops import Coroutine, GeneratorState, Completed
import logging
import outcome
import typing as t

logger = logging.getLogger(__name__)

__all__ = [
    'Gen',
]

YieldType = t.TypeVar('YieldType')
ResumeType = t.TypeVar('ResumeType')
ReturnType = t.TypeVar('ReturnType')

class Gen(Coroutine[YieldType, ResumeType, ReturnType]):
    """A generator whose body is an async function, stepped by the caller

    `start` is called once, immediately, with a Co, and must return an
    awaitable; normally it's an `async def` and returns a coroutine object.
    That coroutine is the body. The body runs only inside calls to
    `resume_with` and friends, and each of those calls runs it until it either
    awaits `co.yield_(value)`, producing Yielded(value), or returns, producing
    Completed(return value).

    ```
    async def countdown(co: Co[int, None], n: int) -> str:
        while n:
            await co.yield_(n)
            n -= 1
        return "liftoff"
    gen = Gen(lambda co: countdown(co, 3))
    gen.resume()  # Yielded(3)
    ```

    The Gen exclusively owns the body; nothing else may send into it.

    Once the Gen has completed, it drops the body and can't be resumed again.
    The Gen also completes if the body raises, in which case the exception
    propagates out of the resuming call, or if the sequencing between Gen and
    body is broken, in which case ProtocolError is raised.

    """
    def __init__(self, start: t.Callable[[Co[YieldType, ResumeType]], t.Awaitable[ReturnType]]) -> None:
        self.airlock: Airlock[YieldType, ResumeType] = Airlock()
        self._name = getattr(start, '__qualname__', repr(start))
        self._coro: t.Optional[Step] = start(Co(self.airlock)).__await__()
        self._started = False
        self._running = False

    def __repr__(self) -> str:
        return f"Gen({self._name})"

    def __del__(self) -> None:
        # dropping the Gen cancels the body the same way close does
        if getattr(self, '_coro', None) is not None and not self._running:
            self.close()

    @property
    def complete(self) -> bool:
        "Whether this Gen is finished and can't be resumed anymore"
        return self._coro is None

    def _begin_step(self, value: outcome.Outcome) -> Step:
        if self._running:
            raise ProtocolError("Gen resumed while it was already running a step", self)
        if self._coro is None:
            raise GeneratorCompleted("Gen resumed after it completed", self)
        logger.debug("%s: resuming with %s", self, value)
        try:
            self.airlock.put(Next.RESUME, value)
        except ProtocolError:
            self.close()
            raise
        self._started = True
        self._running = True
        return self._coro

    def _end_step(self, state: GeneratorState[YieldType, ReturnType]) -> GeneratorState[YieldType, ReturnType]:
        self._running = False
        if isinstance(state, Completed):
            logger.debug("%s: completed with %s", self, state.value)
            self.close()
        else:
            logger.debug("%s: yielded %s", self, state.value)
        return state

    def _abort_step(self, exn: BaseException) -> None:
        self._running = False
        try:
            self.close()
        except BaseException as close_exn:
            logger.debug("%s: closing after %r raised %r", self, exn, close_exn)
            raise close_exn from exn

    def resume_outcome(self, value: outcome.Outcome[ResumeType]) -> GeneratorState[YieldType, ReturnType]:
        """Resume the body with `value`, which is either an outcome.Value or an outcome.Error

        The body's pending `await co.yield_(...)` returns the value or raises
        the error. On the very first resume, the body hasn't started yet, so
        there's nothing to hand the value to and it's discarded.

        """
        coro = self._begin_step(value)
        try:
            state = advance(coro, self.airlock)
        except BaseException as exn:
            self._abort_step(exn)
            raise
        return self._end_step(state)

    def resume_with(self, arg: ResumeType) -> GeneratorState[YieldType, ReturnType]:
        "Resume the body, handing it `arg` as the result of its pending yield"
        return self.resume_outcome(outcome.Value(arg))

    def throw(self, exn: BaseException) -> GeneratorState[YieldType, ReturnType]:
        """Resume the body by raising `exn` at its pending yield

        If the body hasn't started yet, it never will; we close it and raise
        `exn` directly, like throwing into a fresh Python generator.

        """
        if self._coro is not None and not self._started and not self._running:
            self.close()
            raise exn
        return self.resume_outcome(outcome.Error(exn))

    async def async_resume_outcome(self, value: outcome.Outcome[ResumeType]) -> GeneratorState[YieldType, ReturnType]:
        """Like resume_outcome, but the body may await other things between yields

        Whatever the body awaits, other than its own yields, is awaited by us in
        turn, so this must be called from inside the async runner (trio,
        asyncio, ...) that those awaits expect.

        """
        coro = self._begin_step(value)
        try:
            state = await async_advance(coro, self.airlock)
        except BaseException as exn:
            self._abort_step(exn)
            raise
        return self._end_step(state)

    async def async_resume_with(self, arg: ResumeType) -> GeneratorState[YieldType, ReturnType]:
        return await self.async_resume_outcome(outcome.Value(arg))

    async def async_resume(self: Gen[YieldType, None, ReturnType]) -> GeneratorState[YieldType, ReturnType]:
        return await self.async_resume_with(None)

    async def async_throw(self, exn: BaseException) -> GeneratorState[YieldType, ReturnType]:
        if self._coro is not None and not self._started and not self._running:
            self.close()
            raise exn
        return await self.async_resume_outcome(outcome.Error(exn))

    def close(self) -> None:
        """Stop this Gen, dropping the body wherever it's suspended

        The body gets GeneratorExit at its pending yield, so its `finally`
        blocks run, but it can't yield again. Closing a completed Gen does
        nothing.

        """
        if self._running:
            raise ProtocolError("Gen closed while a step is running", self)
        coro, self._coro = self._coro, None
        self.airlock.close()
        if coro is not None:
            logger.debug("%s: closing", self)
            coro.close()

    def __iter__(self: Gen[YieldType, None, ReturnType]) -> t.Generator[YieldType, None, ReturnType]:
        "Resume with None until completion, yielding each value; the completion value is returned"
        while True:
            state = self.resume()
            if isinstance(state, Completed):
                return state.value
            yield state.value

    async def __aiter__(self: Gen[YieldType, None, ReturnType]) -> t.AsyncGenerator[YieldType, None]:
        while True:
            state = await self.async_resume()
            if isinstance(state, Completed):
                return
            yield state.value
