"The outcome of a single resume step, and the interface shared by everything that can be stepped"
from __future__ import annotations
from dataclasses import dataclass
import abc
import typing as t

__all__ = [
    'Yielded',
    'Completed',
    'GeneratorState',
    'Coroutine',
]

YieldType = t.TypeVar('YieldType')
ResumeType = t.TypeVar('ResumeType')
ReturnType = t.TypeVar('ReturnType')

@dataclass(frozen=True)
class Yielded(t.Generic[YieldType]):
    "The body paused and handed out `value`; it can be resumed again"
    value: YieldType

@dataclass(frozen=True)
class Completed(t.Generic[ReturnType]):
    "The body finished and returned `value`; it must not be resumed again"
    value: ReturnType

GeneratorState = t.Union[Yielded[YieldType], Completed[ReturnType]]
"What one step of a Coroutine produces"

class Coroutine(t.Generic[YieldType, ResumeType, ReturnType], metaclass=abc.ABCMeta):
    """Something which can be stepped, one yield at a time, until it completes

    Each call to `resume_with` runs the computation until it either yields a
    value, producing Yielded, or finishes, producing Completed. The argument to
    `resume_with` is handed in to the computation at the point where it last
    yielded.

    """
    @abc.abstractmethod
    def resume_with(self, arg: ResumeType) -> GeneratorState[YieldType, ReturnType]: ...

    def resume(self: Coroutine[YieldType, None, ReturnType]) -> GeneratorState[YieldType, ReturnType]:
        "Resume with None, for computations which don't care what they're resumed with"
        return self.resume_with(None)
