"""
Batch execution models

A BatchTask is an opaque unit of work identified by its original index. Every
submitted task produces exactly one BatchResult, successful or not.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generic, Iterable, List, Optional, TypeVar, Union

from core.errors import PartialBatchFailure, TaskFailure

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """
    Per-task retry settings.

    Attributes:
        max_attempts: Total attempts including the first one
        base_delay: Seconds; the wait after failed attempt n is base_delay * n
    """
    max_attempts: int = 6
    base_delay: float = 1.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0:
            raise ValueError("base_delay cannot be negative")

    def delay_after(self, attempt: int) -> float:
        """Linear backoff before the attempt that follows `attempt`"""
        return self.base_delay * attempt


@dataclass
class BatchTask(Generic[T]):
    """A unit of work: calling `operation` returns an awaitable producing the value"""
    index: int
    operation: Callable[[], Awaitable[T]]
    label: Optional[str] = None  # Shown in logs (prompt snippet, chunk id)

    @classmethod
    def from_items(
        cls,
        items: Iterable[Any],
        factory: Callable[[Any], Callable[[], Awaitable[T]]],
    ) -> List["BatchTask[T]"]:
        """Build one task per item, indexed by position"""
        return [cls(index=i, operation=factory(item)) for i, item in enumerate(items)]


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T


@dataclass(frozen=True)
class Failure:
    error: BaseException


Outcome = Union[Success, Failure]


@dataclass
class BatchResult:
    """Settled outcome of one task"""
    index: int
    outcome: Outcome
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return isinstance(self.outcome, Success)

    @property
    def value(self) -> Any:
        if not isinstance(self.outcome, Success):
            raise ValueError(f"Task {self.index} did not succeed")
        return self.outcome.value

    @property
    def error(self) -> Optional[BaseException]:
        if isinstance(self.outcome, Failure):
            return self.outcome.error
        return None


@dataclass
class BatchReport:
    """
    Aggregate view over a scheduler run.

    Results arrive in completion order; `ordered` restores submission order.
    """
    results: List[BatchResult] = field(default_factory=list)
    batches: int = 0
    waited_seconds: float = 0.0

    @property
    def ordered(self) -> List[BatchResult]:
        return sorted(self.results, key=lambda r: r.index)

    @property
    def succeeded(self) -> List[BatchResult]:
        return [r for r in self.ordered if r.ok]

    @property
    def failed(self) -> List[BatchResult]:
        return [r for r in self.ordered if not r.ok]

    @property
    def values(self) -> List[Any]:
        """Successful values in submission order"""
        return [r.value for r in self.succeeded]

    def raise_for_failures(self) -> None:
        """Raise PartialBatchFailure if any task failed"""
        failures = []
        for result in self.failed:
            error = result.error
            if isinstance(error, TaskFailure):
                failures.append(error)
            else:
                failures.append(TaskFailure(result.index, result.attempts, error))
        if failures:
            raise PartialBatchFailure(failures, total=len(self.results))
