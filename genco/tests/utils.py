import functools
import inspect
import trio
import types
import typing as t
import unittest

T = t.TypeVar('T')

class TrioTestCase(unittest.TestCase):
    """A unittest.TestCase whose `async def` test methods run under trio

    Each async test runs inside its own call to trio.run, with a nursery
    available as `self.nursery`, which is cancelled when the test finishes.
    Plain synchronous test methods are left alone.

    """
    nursery: trio.Nursery

    async def asyncSetUp(self) -> None:
        pass

    async def asyncTearDown(self) -> None:
        pass

    def __init__(self, methodName: str = 'runTest') -> None:
        test = getattr(type(self), methodName, None)
        if inspect.iscoroutinefunction(test):
            setattr(self, methodName, self._run_under_trio(test))
        super().__init__(methodName)

    def _run_under_trio(self, test: t.Callable[[t.Any], t.Awaitable[None]]) -> t.Callable[[], None]:
        async def run() -> None:
            async with trio.open_nursery() as nursery:
                self.nursery = nursery
                await self.asyncSetUp()
                try:
                    await test(self)
                finally:
                    await self.asyncTearDown()
                nursery.cancel_scope.cancel()
        @functools.wraps(test)
        def sync_test() -> None:
            trio.run(run)
        return sync_test

def await_pure(awaitable: t.Awaitable[T]) -> T:
    "Run an awaitable which must complete without ever suspending, and return its result"
    iterable = awaitable.__await__()
    try:
        msg = next(iterable)
    except StopIteration as e:
        return e.value
    else:
        raise Exception("this awaitable actually is impure! it yielded", msg)

@types.coroutine
def foreign_suspend(msg: t.Any = "foreign") -> t.Generator[t.Any, t.Any, t.Any]:
    "Suspend on something that isn't a yield_, as an async library's primitives do"
    return (yield msg)
