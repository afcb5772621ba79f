"The handle a Gen passes to its body, through which the body yields"
from __future__ import annotations
from genco.engine import Airlock, Barrier, Next
import logging
import typing as t

logger = logging.getLogger(__name__)

__all__ = [
    'Co',
]

YieldType = t.TypeVar('YieldType')
ResumeType = t.TypeVar('ResumeType')

class Co(t.Generic[YieldType, ResumeType]):
    """Lets a body yield values out to the Gen running it

    A Co can be freely copied or passed into helper coroutines called by the
    body, but there can only be one yield in flight at a time: every call to
    `yield_` must be awaited before `yield_` is called again.

    """
    __slots__ = ('airlock',)
    def __init__(self, airlock: Airlock[YieldType, ResumeType]) -> None:
        self.airlock = airlock

    def yield_(self, value: YieldType) -> Barrier[YieldType, ResumeType]:
        """Yield `value` out of the Gen; await the result to get the value the Gen is next resumed with

        The value goes into the Airlock immediately, so a call to `yield_` which
        isn't awaited is an error, detected at the next yield or when the body
        returns.

        """
        logger.debug("Co: yielding %s", value)
        self.airlock.put(Next.YIELD, value)
        return Barrier(self.airlock)

    suspend = yield_
