# components/protocols/modbus/repeat_scheduler.py
"""
Repeat scheduler.

Runs one OperationRequest a fixed number of times, or until cancelled,
with a fixed delay after every iteration. Iterations are strictly
sequential. A failed iteration is reported and the loop carries on.

Example:
    `>>> scheduler = RepeatScheduler(protocol, request, Bounded(3), 1000)`
    `>>> await scheduler.run()`
    `3`
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

from components.protocols.modbus.operations import (
    ConfigurationError,
    ExecutionOutcome,
    OperationRequest,
)
from components.reporting.logging_system import (
    EventCategory,
    EventSeverity,
    get_logger,
)

__all__ = [
    "Bounded",
    "Unbounded",
    "RepeatPolicy",
    "repeat_policy",
    "SchedulerState",
    "RepeatScheduler",
]

logger = get_logger(__name__)


# ----------------------------------------------------------------
# Repeat policy
# ----------------------------------------------------------------


@dataclass(frozen=True)
class Bounded:
    """Run exactly count iterations."""

    count: int

    def __post_init__(self):
        if self.count < 1:
            raise ConfigurationError(
                f"Bounded repeat count must be positive, got {self.count}"
            )

    def allows(self, completed: int) -> bool:
        return completed < self.count


@dataclass(frozen=True)
class Unbounded:
    """Run until cancelled."""

    def allows(self, completed: int) -> bool:
        return True


RepeatPolicy = Bounded | Unbounded


def repeat_policy(repeat: int) -> RepeatPolicy:
    """Map a command-line repeat count to a policy; 0 or less means forever."""
    if repeat <= 0:
        return Unbounded()
    return Bounded(repeat)


class SchedulerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    SLEEPING = "sleeping"
    TERMINATED = "terminated"


# ----------------------------------------------------------------
# Scheduler
# ----------------------------------------------------------------


class RepeatScheduler:
    def __init__(
        self,
        protocol,
        request: OperationRequest,
        policy: RepeatPolicy,
        interval_ms: int = 1000,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        on_outcome: Callable[[ExecutionOutcome], None] | None = None,
    ):
        if interval_ms < 0:
            raise ConfigurationError(f"Interval must not be negative, got {interval_ms}")

        self.protocol = protocol
        self.request = request
        self.policy = policy
        self.interval_ms = interval_ms
        self._sleep = sleep
        self._on_outcome = on_outcome

        self.state = SchedulerState.IDLE
        self.iterations = 0
        self.failures = 0

    async def run(self) -> int:
        """
        Execute iterations until the policy is exhausted.

        The delay is measured from the end of each iteration's report, so
        slow responses lengthen the effective period.

        Returns:
            Number of iterations executed

        Raises:
            asyncio.CancelledError: If cancelled; state is TERMINATED first
        """
        if self.state is not SchedulerState.IDLE:
            raise RuntimeError(f"Scheduler already {self.state.value}")

        await logger.log_event(
            EventSeverity.NOTICE,
            EventCategory.SYSTEM,
            f"Starting {self.request.kind.value} of {self.request.count} item(s) "
            f"at {self.request.start} "
            f"({self._describe_policy()}, interval {self.interval_ms} ms)",
        )

        try:
            while self.policy.allows(self.iterations):
                self.state = SchedulerState.RUNNING
                await self._run_iteration()

                self.state = SchedulerState.SLEEPING
                await self._sleep(self.interval_ms / 1000)
        finally:
            self.state = SchedulerState.TERMINATED
            await logger.log_event(
                EventSeverity.NOTICE,
                EventCategory.SYSTEM,
                f"Finished after {self.iterations} iteration(s), "
                f"{self.failures} failed",
                data={"iterations": self.iterations, "failures": self.failures},
            )

        return self.iterations

    async def _run_iteration(self) -> None:
        outcome = await self.protocol.execute(self.request)
        self.iterations += 1
        if not outcome.success:
            self.failures += 1

        await logger.log_outcome(outcome, iteration=self.iterations)
        if self._on_outcome:
            self._on_outcome(outcome)

    def _describe_policy(self) -> str:
        if isinstance(self.policy, Unbounded):
            return "repeating until interrupted"
        return f"{self.policy.count} iteration(s)"
