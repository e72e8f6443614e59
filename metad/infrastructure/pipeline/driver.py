"""Single-flight pipeline driver for metadata records."""

import asyncio
import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum

from dishka import AsyncContainer
from sqlalchemy.exc import SQLAlchemyError

from metad.config import DaemonConfig, QueueOrder
from metad.domain.metadata.model.aggregate import MetadataRecord
from metad.domain.metadata.model.value import UNCHANGED, StageResult
from metad.domain.metadata.port.repository import MetadataRepository
from metad.domain.metadata.stage.dispatcher import StageDispatcher
from metad.domain.shared.error import DomainError, InfrastructureError
from metad.util.di.scope import Scope

logger = logging.getLogger(__name__)

# Store failures the driver logs and survives
_STORE_ERRORS = (InfrastructureError, SQLAlchemyError, OSError)


@dataclass(frozen=True)
class StageCompletion:
    """Message posted on the completion channel when a stage task finishes.

    Attributes:
        record: The record the stage ran for.
        result: Status to persist, or UNCHANGED.
        error: Exception raised by the stage, if any. Domain errors are
            re-raised by the driver; anything else has already been logged
            and arrives with an UNCHANGED result.
    """

    record: MetadataRecord
    result: StageResult
    error: BaseException | None = None


class DriverStatus(Enum):
    """Status of the pipeline driver."""

    IDLE = "idle"
    LOADING = "loading"
    PROCESSING = "processing"
    SLEEPING = "sleeping"
    STOPPING = "stopping"


@dataclass
class DriverState:
    """Runtime state of the driver (not persisted).

    Attributes:
        status: Current driver status.
        in_flight: Record whose stage is currently running.
        cycles: Snapshots loaded so far.
        dispatched_count: Stage runs started.
        written_count: Status writes that matched a row.
        failed_writes: Status writes that failed or matched nothing.
        results: Count of stage results by name (e.g. "converted", "unchanged").
        error: Last store error if any.
    """

    status: DriverStatus = DriverStatus.IDLE
    in_flight: MetadataRecord | None = None
    cycles: int = 0
    dispatched_count: int = 0
    written_count: int = 0
    failed_writes: int = 0
    results: dict[str, int] = field(default_factory=dict)
    error: Exception | None = None


class PipelineDriver:
    """Owns the work queue and runs at most one stage at a time.

    Each cycle loads a snapshot of active records, then for every queued record
    selects a stage, runs it as a task, and waits for its completion message on
    a channel before applying the status transition and moving on. When the
    queue is empty the driver sleeps for ``sleep_interval`` seconds and loads a
    new snapshot. Store failures are logged and never stop the loop; records
    whose write failed are picked up again by the next snapshot.

    Example:
        driver = PipelineDriver(dispatcher, config.daemon)
        driver.set_container(container)
        driver.start()
        ...
        driver.stop()
    """

    def __init__(self, dispatcher: StageDispatcher, config: DaemonConfig) -> None:
        self._dispatcher = dispatcher
        self._config = config
        self._queue: deque[MetadataRecord] = deque()
        self._completions: asyncio.Queue[StageCompletion] = asyncio.Queue()
        self._in_flight: asyncio.Task | None = None
        self._state = DriverState()
        self._shutdown = False
        self._wakeup = asyncio.Event()
        self._task: asyncio.Task | None = None
        self._container: AsyncContainer | None = None

    @property
    def state(self) -> DriverState:
        return self._state

    @property
    def queued(self) -> list[MetadataRecord]:
        """Records still waiting in the current snapshot, in processing order."""
        if self._config.queue_order == QueueOrder.LIFO:
            return list(reversed(self._queue))
        return list(self._queue)

    def set_container(self, container: AsyncContainer) -> None:
        """Set the DI container used to open a unit of work per store operation."""
        self._container = container

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> asyncio.Task:
        """Start the driver loop in a background task."""
        if self._container is None:
            raise RuntimeError("Container not set. Call set_container() first.")

        self._shutdown = False
        self._wakeup.clear()
        self._task = asyncio.create_task(self.run_forever(), name="metad-driver")
        logger.info("Pipeline driver started")
        return self._task

    def stop(self) -> None:
        """Signal the driver to stop.

        The stage in flight is allowed to finish and its status is written
        before the loop exits.
        """
        self._shutdown = True
        self._state.status = DriverStatus.STOPPING
        self._wakeup.set()
        logger.info("Pipeline driver stopping...")

    async def run_forever(self) -> None:
        """Main loop: snapshot, drain, sleep, repeat until stopped."""
        try:
            await self.initialize()
            while not self._shutdown:
                await self.run_cycle()
                if self._shutdown:
                    break
                await self.sleep_and_restart(self._config.sleep_interval)
        except asyncio.CancelledError:
            logger.info("Pipeline driver cancelled")
            if self._in_flight is not None and not self._in_flight.done():
                self._in_flight.cancel()
            raise
        finally:
            self._state.status = DriverStatus.IDLE
            logger.info("Pipeline driver stopped")

    async def run_once(self) -> None:
        """Load one snapshot and process it to exhaustion."""
        await self.initialize()
        await self.run_cycle()
        self._state.status = DriverStatus.IDLE

    # -------------------------------------------------------------------------
    # Cycle
    # -------------------------------------------------------------------------

    async def initialize(self) -> int:
        """Load the active snapshot into the work queue.

        A store failure is logged and leaves the queue empty, so the driver
        goes straight back to sleep.

        Returns:
            Number of queued records.
        """
        if self._container is None:
            raise RuntimeError("Container not set")

        self._state.status = DriverStatus.LOADING
        self._state.cycles += 1
        records: list[MetadataRecord] = []
        try:
            async with self._container(scope=Scope.UOW) as scope:
                repo = await scope.get(MetadataRepository)
                records = await repo.find_active_snapshot()
        except _STORE_ERRORS as e:
            self._state.error = e
            logger.error(f"Could not load metadata snapshot: {e}")
        else:
            # Records no longer in the snapshot drop their retry state
            self._dispatcher.retain({record.id for record in records})

        self._queue = deque(records)
        logger.info(f"metad initialized with {len(records)} metadata for processing")
        return len(records)

    async def run_cycle(self) -> None:
        """Drain the work queue, one stage in flight at a time."""
        self._state.status = DriverStatus.PROCESSING
        while self._queue and not self._shutdown:
            record = self._next()
            self._dispatch(record)
            completion = await self._completions.get()
            self._in_flight = None
            self._state.in_flight = None
            if isinstance(completion.error, DomainError):
                raise completion.error
            await self.on_stage_complete(completion.record, completion.result)

    async def sleep_and_restart(self, interval: float) -> None:
        """Wait ``interval`` seconds (or until stopped), then reload the snapshot."""
        self._state.status = DriverStatus.SLEEPING
        logger.info(f"metad is sleeping for {interval} seconds")
        try:
            await asyncio.wait_for(self._wakeup.wait(), timeout=interval)
        except asyncio.TimeoutError:
            pass
        if not self._shutdown:
            await self.initialize()

    async def on_stage_complete(self, record: MetadataRecord, result: StageResult) -> None:
        """Apply a stage result: no-op for UNCHANGED, otherwise one status write."""
        self._count(result)
        if result is UNCHANGED:
            return

        # Raises InvalidStateError if a stage produced an out-of-order status
        record.transition_to(result)
        logger.info(f"Setting {record.key} to status {result.name}")

        try:
            async with self._container(scope=Scope.UOW) as scope:  # type: ignore[misc]
                repo = await scope.get(MetadataRepository)
                updated = await repo.update_status(record.id, result)
        except _STORE_ERRORS as e:
            self._state.error = e
            self._state.failed_writes += 1
            logger.error(f"Could not set {record.key} to {result.name}: {e}")
            return

        if updated:
            self._state.written_count += 1
        else:
            self._state.failed_writes += 1
            logger.warning(f"Record {record.id} for {record.key} no longer exists")

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _next(self) -> MetadataRecord:
        if self._config.queue_order == QueueOrder.LIFO:
            return self._queue.pop()
        return self._queue.popleft()

    def _dispatch(self, record: MetadataRecord) -> None:
        if self._in_flight is not None and not self._in_flight.done():
            raise RuntimeError("A stage is already in flight")

        # Fails loudly on statuses no stage handles, before anything runs
        stage = self._dispatcher.select(record)

        self._state.in_flight = record
        self._state.dispatched_count += 1
        self._in_flight = asyncio.create_task(
            self._run_stage(record), name=f"stage-{stage.name}-{record.key}"
        )

    async def _run_stage(self, record: MetadataRecord) -> None:
        """Stage task body; always posts exactly one completion."""
        try:
            result = await self._dispatcher.dispatch(record)
        except asyncio.CancelledError:
            raise
        except DomainError as e:
            await self._completions.put(StageCompletion(record, UNCHANGED, error=e))
        except Exception as e:
            logger.exception(f"Stage for {record.key} crashed: {e}")
            await self._completions.put(StageCompletion(record, UNCHANGED, error=e))
        else:
            await self._completions.put(StageCompletion(record, result))

    def _count(self, result: StageResult) -> None:
        self._state.results[result.value] = self._state.results.get(result.value, 0) + 1
