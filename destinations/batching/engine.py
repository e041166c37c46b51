"""
Purpose: The batch "orchestrator" (single entry point).
What it does:

Coordinates a route batch end-to-end:

- takes an ordered list of destinations (route-table rows)

- queries them strictly one at a time, in input order (never concurrently)

- sleeps PacingPolicy.delay_seconds between calls (not after the last one)

- isolates failures: one destination raising never aborts the batch

- stops between destinations when cancelled / past the deadline

- returns a BatchResult with exactly one entry per input id

Typical public function signature:

- RouteBatcher(route_query, policy).run(destinations) -> BatchResult

Rule: Engine is the only file other modules should call directly for batching.
"""

# destinations/batching/engine.py

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, List, Optional, Protocol, Sequence, Set

from ..models import BatchResult, Destination, RouteOutcome, RouteResult
from .policy import PacingPolicy, default_policy

logger = logging.getLogger(__name__)


# ---- Types you plug into from routing/ (ORS) ----
# Anything that turns one Destination into one RouteResult, e.g. routing.RouteQuery.
RouteQueryFn = Callable[[Destination], RouteResult]


class CancelSignal(Protocol):
    """threading.Event and friends."""

    def is_set(self) -> bool: ...


class RouteBatcher:
    """
    Sequential, rate-limited route batch.

    Cancellation policy: partial mapping. Destinations already queried keep
    their results, the rest get a CANCELLED zero fallback, and the returned
    BatchResult has complete=False. An in-flight query always finishes.
    """

    def __init__(
        self,
        route_query: RouteQueryFn,
        policy: Optional[PacingPolicy] = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.route_query = route_query
        self.policy = policy or default_policy()
        self.policy.validate()
        self.sleep = sleep
        self.clock = clock

    def _should_stop(self, cancel: Optional[CancelSignal], deadline: Optional[float]) -> Optional[str]:
        if cancel is not None and cancel.is_set():
            return "batch cancelled"
        if deadline is not None and self.clock() >= deadline:
            return "batch deadline reached"
        return None

    @staticmethod
    def _cancel_remaining(
        remaining: Sequence[Destination],
        outcomes: Dict[str, RouteResult],
        reason: str,
        *,
        total: int,
    ) -> None:
        logger.info(f"{reason}: {len(remaining)} of {total} destinations not queried")
        for skipped in remaining:
            outcomes[skipped.id] = RouteResult.fallback(RouteOutcome.CANCELLED, reason)

    def _query_one(self, destination: Destination) -> RouteResult:
        try:
            result = self.route_query(destination)
        except Exception as e:
            logger.error(f"Failed to calculate route for {destination.label}: {e!r}")
            return RouteResult.fallback(RouteOutcome.UNEXPECTED_ERROR, repr(e))

        if not isinstance(result, RouteResult):
            logger.error(f"Route query returned {type(result).__name__} instead of a RouteResult for {destination.label}")
            return RouteResult.fallback(
                RouteOutcome.UNEXPECTED_ERROR, f"route query returned {type(result).__name__}"
            )
        return result

    def run(
        self,
        destinations: Sequence[Destination],
        *,
        cancel: Optional[CancelSignal] = None,
        deadline: Optional[float] = None,
    ) -> BatchResult:
        """
        Query every destination in order and collect the results by id.

        Parameters
        ----------
        destinations:
            Route-table rows to query. Order only affects timing, not the mapping.
        cancel:
            Optional object with is_set(); checked before every query and before every pacing sleep.
        deadline:
            Optional absolute time on self.clock (monotonic seconds by default).

        Returns
        -------
        BatchResult:
            distances / toll_prices / outcomes with exactly the input id set.
            complete is False if cancellation cut the batch short.
        """
        outcomes: Dict[str, RouteResult] = {}

        # duplicate ids: the first row wins, later ones are not re-queried
        queue: List[Destination] = []
        seen_ids: Set[str] = set()
        for destination in destinations:
            if destination.id in seen_ids:
                logger.warning(f"Duplicate destination id {destination.id!r} ({destination.label}) skipped")
                continue
            seen_ids.add(destination.id)
            queue.append(destination)

        logger.info(
            f"Calculating routes for {len(queue)} destinations "
            f"(ETA: {max(len(queue) - 1, 0) * self.policy.delay_seconds:.0f} seconds)"
        )

        complete = True
        delay = self.policy.delay_seconds
        for index, destination in enumerate(queue):
            reason = self._should_stop(cancel, deadline)
            if reason is not None:
                self._cancel_remaining(queue[index:], outcomes, reason, total=len(queue))
                complete = False
                break

            outcomes[destination.id] = self._query_one(destination)

            if index == len(queue) - 1:
                continue

            # cancelled mid-query, or the next call could only start after the deadline: stop instead of sleeping
            reason = self._should_stop(cancel, deadline)
            if reason is None and deadline is not None and self.clock() + delay >= deadline:
                reason = "batch deadline reached"
            if reason is not None:
                self._cancel_remaining(queue[index + 1:], outcomes, reason, total=len(queue))
                complete = False
                break

            self.sleep(delay)

        failed = sum(1 for result in outcomes.values() if not result.ok)
        logger.info(f"Route batch finished: {len(outcomes) - failed} ok, {failed} fallback")

        return BatchResult(
            distances={dest_id: result.distance_km for dest_id, result in outcomes.items()},
            toll_prices={dest_id: result.toll_price for dest_id, result in outcomes.items()},
            outcomes=outcomes,
            complete=complete,
        )
