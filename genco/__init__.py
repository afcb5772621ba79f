"""Generators built out of async functions, stepped one yield at a time

A `Gen` runs a body written as an ordinary `async def`, which takes a `Co` as
its first argument. The body yields a value out by awaiting `co.yield_(value)`,
and the result of that await is whatever the caller resumes the `Gen` with
next. Like so:

```
async def running_total(co: Co[int, int]) -> int:
    total = 0
    n = await co.yield_(total)
    while n:
        total += n
        n = await co.yield_(total)
    return total

gen = Gen(running_total)
gen.resume_with(None)  # Yielded(0)
gen.resume_with(5)     # Yielded(5)
gen.resume_with(3)     # Yielded(8)
gen.resume_with(0)     # Completed(8)
```

This is the same thing as a Python generator with `send`, so why bother?

Because the body is a coroutine, it can be written with `await` rather than
`yield`, so it composes with other async code. A body can pass its `Co` down
into helper coroutines, which can yield on the body's behalf, without threading
`yield from` through every layer. And when driven with `async_resume_with`
from inside an async runner such as trio or asyncio, the body can also await
that runner's operations between its yields; those awaits pass straight
through the `Gen` to the runner.

The underlying mechanism is just the native coroutine protocol. A step is a
single `send` into the body, and `co.yield_` works by leaving the value in an
`Airlock` shared with the `Gen`, then suspending the body at a `Barrier`. The
`Gen` takes the value out of the `Airlock` and returns it as `Yielded`. There
are no threads and no stack switching; the body and its caller take strict
turns running on a single stack.

The first resume value is never seen by the body, since the body hasn't
reached any yield yet when it is handed in. Resuming a `Gen` which has
completed raises `GeneratorCompleted`, and any other misuse of the yield/resume
turn-taking raises `ProtocolError`.

"""
from genco.ops import Yielded, Completed, GeneratorState, Coroutine
from genco.engine import Airlock, Barrier, Next, ProtocolError, GeneratorCompleted
from genco.co import Co
from genco.gen import Gen

__all__ = [
    'Gen',
    'Co',
    'Yielded',
    'Completed',
    'GeneratorState',
    'Coroutine',
    'Airlock',
    'Barrier',
    'Next',
    'ProtocolError',
    'GeneratorCompleted',
]
