"""Run GPX processing off the calling thread.

One request in, one response out: there is no streaming, no partial result
and no cooperative cancellation. A caller that stops waiting simply abandons
the future.
"""

import asyncio
import logging
from concurrent.futures import Executor, Future, ProcessPoolExecutor
from dataclasses import dataclass

from gpx_route_analyzer.config import DEFAULT_SMOOTHING_LEVEL, SmoothingLevel
from gpx_route_analyzer.pipeline import AnalysisResponse, process_gpx

logger = logging.getLogger(__name__)

PROCESS_GPX = "PROCESS_GPX"


@dataclass(frozen=True)
class ProcessRequest:
    gpx_text: str
    file_name: str | None = None
    smoothing_level: SmoothingLevel | str = DEFAULT_SMOOTHING_LEVEL
    type: str = PROCESS_GPX


def handle_request(request: ProcessRequest) -> AnalysisResponse:
    """Handle one job message. Runs inside the executor."""
    if request.type != PROCESS_GPX:
        return AnalysisResponse.failure("Invalid message type")
    return process_gpx(request.gpx_text, request.smoothing_level, request.file_name)


class GPXWorker:
    """Executor-backed request/response channel for GPX processing.

    Defaults to a process pool because the pipeline is CPU bound; any
    concurrent.futures executor can be injected instead. Each request is
    processed independently, so concurrent jobs share no state.
    """

    def __init__(self, executor: Executor | None = None, max_workers: int | None = None):
        self._owns_executor = executor is None
        self.executor = executor if executor is not None else ProcessPoolExecutor(max_workers=max_workers)

    def submit(self, request: ProcessRequest) -> "Future[AnalysisResponse]":
        logger.debug("Submitting %s job for %s", request.type, request.file_name or "<input>")
        return self.executor.submit(handle_request, request)

    def process(self, request: ProcessRequest, timeout: float | None = None) -> AnalysisResponse:
        """Submit a request and wait for its response.

        Raises:
            concurrent.futures.TimeoutError: If no response arrives within timeout.
        """
        return self.submit(request).result(timeout=timeout)

    async def process_async(self, request: ProcessRequest) -> AnalysisResponse:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, handle_request, request)

    def shutdown(self, wait: bool = True) -> None:
        if self._owns_executor:
            self.executor.shutdown(wait=wait)

    def __enter__(self) -> "GPXWorker":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
