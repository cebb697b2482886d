"""
Compensating action sequences.

The credential service and the record store are independent systems
with no shared transaction.  Operations that touch both run their
steps through a ``CompensatingSequence``: each successful forward step
may register an undo action, and when a later step fails the caller
asks the sequence to compensate, which runs the registered undo
actions in reverse order.

Compensation is best effort and never retried.  A failed undo action
does not stop the remaining ones; it is logged and reported back to
the caller as a ``CompensationFailure`` so the operation can surface
it.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from ..core.backend import Result


logger = logging.getLogger(__name__)


@dataclass
class CompensationFailure:
    step: str
    message: str


class CompensatingSequence:
    """Ordered forward steps with their undo actions."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._undo: List[Tuple[str, Callable[[], Result]]] = []

    def run(
        self,
        step: str,
        action: Callable[[], Result],
        compensate: Optional[Callable[[Any], Result]] = None,
    ) -> Result:
        """Run a forward step.

        ``action`` returns a ``(data, error)`` tuple.  When it succeeds
        and ``compensate`` is given, ``compensate(data)`` is registered
        as the undo action for this step.  A failed step registers
        nothing; its error is returned unchanged.
        """
        data, error = action()
        if error:
            logger.warning("%s: step '%s' failed: %s", self.name, step, error.get("message"))
            return None, error
        if compensate is not None:
            self._undo.append((step, lambda: compensate(data)))
        return data, None

    @property
    def pending(self) -> int:
        """Number of undo actions registered so far."""
        return len(self._undo)

    def compensate(self) -> List[CompensationFailure]:
        """Undo completed steps, most recent first."""
        failures: List[CompensationFailure] = []
        while self._undo:
            step, undo = self._undo.pop()
            _, error = undo()
            if error:
                message = error.get("message") or "unknown error"
                logger.error("%s: could not undo step '%s': %s", self.name, step, message)
                failures.append(CompensationFailure(step=step, message=message))
            else:
                logger.info("%s: undid step '%s'", self.name, step)
        return failures
