"""The Airlock shared between a Gen and its body, and the step engine that drives the body

A Gen and the body it runs never execute at the same time. Control passes back
and forth between them like a ball in a game of ping-pong, and the Airlock is
the one place where a value rides along with the ball. When the Gen resumes the
body, it puts a RESUME value into the Airlock; when the body yields, it puts a
YIELD value into the Airlock. Each side takes out what the other side put in,
so between steps the Airlock is always EMPTY.

The body is a native coroutine, and a step is a single `send` into it. The
body suspends by awaiting a Barrier, which is the only thing a well-behaved
body ever yields up to us. So a single `send` always runs the body either to
its next Barrier or to its return; there's never a need to loop looking for a
pause point.

Anything that breaks this sequencing is a bug in the body or in whoever is
driving the Gen; we raise ProtocolError immediately, rather than carrying on
with a value silently dropped or delivered to the wrong place.

"""
from __future__ import annotations
from genco.ops import GeneratorState, Yielded, Completed
import enum
import logging
import outcome
import types
import typing as t

logger = logging.getLogger(__name__)

__all__ = [
    'ProtocolError',
    'GeneratorCompleted',
    'Next',
    'Airlock',
    'Barrier',
    'advance',
    'async_advance',
]

YieldType = t.TypeVar('YieldType')
ResumeType = t.TypeVar('ResumeType')
ReturnType = t.TypeVar('ReturnType')

Step = t.Generator[t.Any, t.Any, t.Any]
"The `__await__` iterator of a body; one `send` into it is one step"

class ProtocolError(Exception):
    "The yield/resume sequencing between a Gen and its body was broken"
    pass

class GeneratorCompleted(ProtocolError):
    "A Gen was resumed after it had already completed"
    pass

class Next(enum.Enum):
    "What, if anything, is waiting in an Airlock"
    EMPTY = "empty"
    RESUME = "resume"
    YIELD = "yield"

class Airlock(t.Generic[YieldType, ResumeType]):
    """A single slot through which a Gen and its body pass values to each other

    This is not a lock; only one side is ever running, so there's nothing to
    exclude. It just checks that the two sides take turns. A RESUME holds an
    outcome.Outcome, so that the Gen can hand in either a value or an exception.

    Once the Gen is done with the body, it closes the Airlock, and nothing can
    be put into it anymore.

    """
    __slots__ = ('_tag', '_value', 'closed')
    def __init__(self) -> None:
        self._tag = Next.EMPTY
        self._value: t.Any = None
        self.closed = False

    def __repr__(self) -> str:
        return f"Airlock({self._tag.name}, {self._value!r})"

    def peek(self) -> Next:
        "Return what's currently waiting in the Airlock, without taking it"
        return self._tag

    def put(self, tag: Next, value: t.Any) -> None:
        """Store `value` for the other side to take

        A RESUME can only go into an empty Airlock. A YIELD can also overwrite a
        RESUME, since the very first resume value is never read by the body.

        """
        if self.closed:
            raise ProtocolError("put into an Airlock whose Gen has already completed", tag, value)
        if tag is Next.RESUME:
            allowed: t.Tuple[Next, ...] = (Next.EMPTY,)
        elif tag is Next.YIELD:
            allowed = (Next.EMPTY, Next.RESUME)
        else:
            raise ValueError("can only put RESUME or YIELD into an Airlock", tag)
        if self._tag not in allowed:
            raise ProtocolError("can't put", tag, "into an Airlock which already holds", self._tag, self._value)
        self._tag = tag
        self._value = value

    def take(self) -> t.Tuple[Next, t.Any]:
        "Remove and return whatever is in the Airlock, leaving it empty"
        ret = (self._tag, self._value)
        self._tag = Next.EMPTY
        self._value = None
        return ret

    def close(self) -> None:
        self.closed = True
        self._tag = Next.EMPTY
        self._value = None

class Barrier(t.Generic[YieldType, ResumeType]):
    """The awaitable returned by Co.yield_, at which the body waits to be resumed

    By the time a Barrier exists, the yielded value is already in the Airlock.
    Awaiting the Barrier yields the Barrier itself up out of the body, which is
    how the step engine knows the body paused of its own accord. When the body
    is next sent into, we take the RESUME waiting in the Airlock and unwrap it;
    so `await co.yield_(x)` either returns the resume value or raises the
    exception that was thrown in.

    """
    __slots__ = ('airlock',)
    def __init__(self, airlock: Airlock[YieldType, ResumeType]) -> None:
        self.airlock = airlock

    def __await__(self) -> t.Generator[Barrier[YieldType, ResumeType], t.Any, ResumeType]:
        yield self
        tag, value = self.airlock.take()
        if tag is not Next.RESUME:
            raise ProtocolError("body resumed at a yield, but the Airlock held", tag, value)
        resumed: outcome.Outcome = value
        return resumed.unwrap()

def _is_own_barrier(msg: t.Any, airlock: Airlock) -> bool:
    return isinstance(msg, Barrier) and msg.airlock is airlock

def _yielded(airlock: Airlock[YieldType, t.Any]) -> Yielded[YieldType]:
    tag, value = airlock.take()
    if tag is not Next.YIELD:
        raise ProtocolError("body suspended at a Barrier without yielding a value; was it awaited twice?", tag)
    return Yielded(value)

def _completed(airlock: Airlock, result: ReturnType) -> Completed[ReturnType]:
    # a RESUME left behind is the first resume value, which a body that never yields doesn't read
    tag, value = airlock.take()
    if tag is Next.YIELD:
        raise ProtocolError("body returned with a yielded value that it never awaited", value)
    return Completed(result)

def advance(coro: Step, airlock: Airlock[YieldType, t.Any]) -> GeneratorState[YieldType, t.Any]:
    """Run `coro` until its next yield or its return

    The caller must already have put the RESUME into `airlock`. Exceptions
    raised by the body propagate.

    """
    try:
        msg = coro.send(None)
    except StopIteration as e:
        return _completed(airlock, e.value)
    if not _is_own_barrier(msg, airlock):
        raise ProtocolError(
            "body suspended on something other than its own yield_; "
            "bodies which await other awaitables must be driven with async_resume_with", msg)
    return _yielded(airlock)

@types.coroutine
def async_advance(coro: Step, airlock: Airlock[YieldType, t.Any]) -> t.Generator[t.Any, t.Any, GeneratorState[YieldType, t.Any]]:
    """Run `coro` until its next yield or its return, from inside some async runner

    Anything the body suspends on, other than its own Barrier, is passed up to
    whatever is running us, and whatever that sends or throws back is passed
    down to the body; just what `await` would do. This lets the body await
    trio or asyncio operations between yields.

    """
    sent: outcome.Outcome = outcome.Value(None)
    while True:
        try:
            msg = sent.send(coro)
        except StopIteration as e:
            return _completed(airlock, e.value)
        if _is_own_barrier(msg, airlock):
            return _yielded(airlock)
        logger.debug("async_advance: passing %s up to the enclosing runner", msg)
        try:
            sent = outcome.Value((yield msg))
        except BaseException as exn:
            sent = outcome.Error(exn)
