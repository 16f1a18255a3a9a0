"""
Rate-limited, retrying batch executor.

Every multi-item generation call (images for a script, speech for narration
chunks) goes through the same scheduler: tasks run concurrently in fixed-size
batches, the scheduler pauses between batches to stay under upstream rate
limits, and each task retries with linear backoff before settling as a failure.

Usage:
    scheduler = BatchScheduler(batch_size=5, inter_batch_delay=5.0)
    tasks = BatchTask.from_items(prompts, lambda p: lambda: provider.generate_image(p))
    report = await scheduler.run_report(tasks)
    images = report.values
"""

import asyncio
import logging
import math
import time
from typing import Awaitable, Callable, Dict, List, Optional, Sequence

from core.errors import DeadlineExceeded, TaskFailure
from core.models.batch import (
    BatchReport,
    BatchResult,
    BatchTask,
    Failure,
    RetryPolicy,
    Success,
)

logger = logging.getLogger(__name__)

Sleeper = Callable[[float], Awaitable[None]]


class BatchScheduler:
    """
    Runs BatchTasks in consecutive concurrent batches.

    A failure never cancels sibling tasks. Results carry the original task
    index; their list order is completion order within each batch.
    """

    def __init__(
        self,
        batch_size: int = 5,
        inter_batch_delay: float = 5.0,
        retry: Optional[RetryPolicy] = None,
        sleep: Sleeper = asyncio.sleep,
    ):
        """
        Args:
            batch_size: Tasks started concurrently per batch
            inter_batch_delay: Seconds to pause between batches (not after the last)
            retry: Per-task retry policy (defaults to 6 attempts, 1s base delay)
            sleep: Awaitable sleep used for all waits
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if inter_batch_delay < 0:
            raise ValueError("inter_batch_delay cannot be negative")
        self.batch_size = batch_size
        self.inter_batch_delay = inter_batch_delay
        self.retry = retry or RetryPolicy()
        self._sleep = sleep

    def batches(self, tasks: Sequence[BatchTask]) -> List[List[BatchTask]]:
        """Partition tasks into consecutive batches"""
        return [
            list(tasks[i:i + self.batch_size])
            for i in range(0, len(tasks), self.batch_size)
        ]

    def batch_count(self, task_count: int) -> int:
        return math.ceil(task_count / self.batch_size) if task_count else 0

    async def run(
        self,
        tasks: Sequence[BatchTask],
        deadline: Optional[float] = None,
    ) -> List[BatchResult]:
        """
        Execute all tasks and return one result per task.

        Args:
            tasks: Tasks to execute
            deadline: Optional overall time limit in seconds. Tasks that have not
                settled when it expires are reported as DeadlineExceeded failures.

        Returns:
            BatchResults, one per submitted task
        """
        report = await self.run_report(tasks, deadline=deadline)
        return report.results

    async def run_report(
        self,
        tasks: Sequence[BatchTask],
        deadline: Optional[float] = None,
    ) -> BatchReport:
        """Like run(), but returns the aggregate BatchReport"""
        report = BatchReport()
        settled: Dict[int, BatchResult] = {}

        if deadline is None:
            await self._run_batches(tasks, report, settled)
        else:
            try:
                await asyncio.wait_for(self._run_batches(tasks, report, settled), timeout=deadline)
            except asyncio.TimeoutError:
                abandoned = [t for t in tasks if t.index not in settled]
                logger.warning(
                    "Batch deadline of %ss expired with %d task(s) unsettled",
                    deadline, len(abandoned),
                )
                for task in abandoned:
                    result = BatchResult(
                        index=task.index,
                        outcome=Failure(DeadlineExceeded(task.index, deadline)),
                    )
                    settled[task.index] = result
                    report.results.append(result)

        return report

    async def _run_batches(
        self,
        tasks: Sequence[BatchTask],
        report: BatchReport,
        settled: Dict[int, BatchResult],
    ) -> None:
        batches = self.batches(tasks)
        total = len(tasks)

        for number, batch in enumerate(batches, start=1):
            first = batch[0].index
            logger.info(
                "Processing batch %d/%d: %d task(s) starting at index %d of %d",
                number, len(batches), len(batch), first, total,
            )
            report.batches += 1

            # Each coroutine records its own result so a deadline keeps finished work
            async def run_and_record(task: BatchTask) -> None:
                result = await self._run_with_retry(task)
                settled[task.index] = result
                report.results.append(result)

            await asyncio.gather(*(run_and_record(task) for task in batch))

            if number < len(batches):
                logger.info(
                    "Rate limiting: waiting %ss before next batch", self.inter_batch_delay
                )
                started = time.monotonic()
                await self._sleep(self.inter_batch_delay)
                report.waited_seconds += max(self.inter_batch_delay, time.monotonic() - started)

    async def _run_with_retry(self, task: BatchTask) -> BatchResult:
        """Run a single task, retrying with linear backoff. Never raises."""
        max_attempts = self.retry.max_attempts
        last_error: Optional[BaseException] = None

        for attempt in range(1, max_attempts + 1):
            try:
                value = await task.operation()
                if attempt > 1:
                    logger.info("Task %d succeeded on attempt %d", task.index, attempt)
                return BatchResult(index=task.index, outcome=Success(value), attempts=attempt)
            except Exception as e:
                last_error = e
                if attempt < max_attempts:
                    delay = self.retry.delay_after(attempt)
                    logger.warning(
                        "Task %d attempt %d/%d failed: %s. Retrying in %ss",
                        task.index, attempt, max_attempts, e, delay,
                    )
                    await self._sleep(delay)

        logger.error(
            "Task %d failed after %d attempt(s): %s", task.index, max_attempts, last_error
        )
        return BatchResult(
            index=task.index,
            outcome=Failure(TaskFailure(task.index, max_attempts, last_error)),
            attempts=max_attempts,
        )
