import asyncio


class ProgressEstimator:
    """Cosmetic progress for requests that report none.

    Advances linearly so that ``expected_seconds * batch_size`` reaches 99%,
    then holds there until ``stop()``. It never signals real completion.
    """

    CAP = 99.0

    def __init__(
        self,
        *,
        expected_seconds: float = 14.0,
        interval_seconds: float = 0.1,
        batch_size: int = 1,
    ) -> None:
        ticks = expected_seconds / interval_seconds * max(1, batch_size)
        self._step = 100.0 / ticks
        self._interval = interval_seconds
        self._percent = 0.0
        self._task: asyncio.Task[None] | None = None

    @property
    def percent(self) -> float:
        return self._percent

    @property
    def running(self) -> bool:
        return self._task is not None

    def start(self) -> None:
        if self._task is None:
            self._percent = 0.0
            self._task = asyncio.get_running_loop().create_task(self._tick())

    async def stop(self) -> None:
        """Cancel the ticker and report 100%."""
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        self._percent = 100.0

    async def _tick(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self._percent = min(self._percent + self._step, self.CAP)
