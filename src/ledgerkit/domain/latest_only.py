"""Cooperative cancellation and single-flight-with-replacement execution.

A new submission supersedes the previous one: the older run is asked to stop
through its cancellation token, and its result is never published even if it
finishes anyway.
"""

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

from ledgerkit.domain.errors import AccumulationCancelled

logger = logging.getLogger(__name__)


class CancellationToken:
    """Flag a long-running computation polls to learn it was superseded."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        """Raise AccumulationCancelled if cancellation was requested."""
        if self._event.is_set():
            raise AccumulationCancelled("Superseded by a newer request")


class LatestOnlyRunner:
    """Run computations in the background, publishing only the newest result.

    ``fn`` passed to ``submit`` must accept a ``cancel`` keyword argument
    receiving the run's CancellationToken.
    """

    def __init__(
        self,
        publish: Callable[[Any], None],
        executor: Optional[Executor] = None,
    ):
        """Initialize runner.

        Args:
            publish: Called with the result of the latest completed run
            executor: Executor to run on; a single-use thread pool is created
                (and owned) if omitted
        """
        self.publish = publish
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=2, thread_name_prefix="ledgerkit-latest"
        )
        self._lock = threading.Lock()
        self._generation = 0
        self._token: Optional[CancellationToken] = None

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        """Start a run, cancelling any run still in flight.

        Returns:
            Future of the run; it resolves to None when the run was superseded
        """
        token = CancellationToken()
        with self._lock:
            if self._token is not None:
                self._token.cancel()
            self._generation += 1
            generation = self._generation
            self._token = token

        return self._executor.submit(self._run, generation, token, fn, args, kwargs)

    def cancel(self) -> None:
        """Cancel the run in flight, if any, without starting a new one."""
        with self._lock:
            if self._token is not None:
                self._token.cancel()
            self._generation += 1
            self._token = None

    def _run(self, generation, token, fn, args, kwargs):
        try:
            result = fn(*args, cancel=token, **kwargs)
        except AccumulationCancelled:
            logger.debug("Run %d cancelled", generation)
            return None
        except Exception:
            logger.warning("Run %d failed", generation, exc_info=True)
            raise

        # Publishing under the lock keeps a newer submit from interleaving
        # between the generation check and the publish call.
        with self._lock:
            if generation != self._generation or token.cancelled:
                logger.debug("Dropping result of superseded run %d", generation)
                return None
            self.publish(result)
        return result

    def shutdown(self, wait: bool = True) -> None:
        """Cancel the current run and release an owned executor."""
        self.cancel()
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
