"""Page replacement policies — count the faults a reference string causes.

When every frame is occupied and a program touches a page that is not
resident, the OS must evict something.  The *replacement policy* picks
the victim, and the number of page faults it produces over a reference
string is the standard way to compare policies.

Policies (Strategy pattern, selected by ``PolicyKind``):
    - **FIFO** — evict the page that was loaded first.  Simple, but can
      suffer from Belady's anomaly (more frames → more faults for some
      reference strings).
    - **LRU** — evict the page used least recently.  Recency is kept
      purely by position in an OrderedDict: a hit moves the page to the
      end, so the front is always the victim.
    - **OPT** — Belady's optimal algorithm.  Look ahead through the rest
      of the reference string and evict the resident page whose next
      use is furthest away, or a page that is never used again.  Not
      implementable in a real kernel (it needs the future), but it is
      the lower bound every other policy is measured against.

Every policy is a pure function of (reference string, page count,
frame count).  The resident set is created at the start of each call
and dropped on return, so one policy object can be reused and shared
freely.  An optional ``Logger`` receives a per-request trace.
"""

from collections import OrderedDict, deque
from collections.abc import Sequence
from enum import StrEnum
from typing import Protocol

from py_pager.logging import Logger, LogLevel
from py_pager.membership import contains
from py_pager.refstring import normalize


class PolicyKind(StrEnum):
    """Tags for the available replacement policies."""

    FIFO = "fifo"
    LRU = "lru"
    OPT = "opt"


# ---------------------------------------------------------------------------
# Replacement Policy Protocol (Strategy pattern)
# ---------------------------------------------------------------------------


class ReplacementPolicy(Protocol):
    """Interface every page replacement algorithm satisfies."""

    @property
    def kind(self) -> PolicyKind:
        """Return the tag identifying this policy."""
        ...  # pragma: no cover

    def compute_faults(
        self,
        requests: Sequence[int],
        page_count: int,
        frame_count: int,
        *,
        logger: Logger | None = None,
    ) -> int:
        """Return the number of page faults *requests* causes.

        Args:
            requests: The reference string (normalized before use).
            page_count: Size of the virtual address space in pages.
            frame_count: Number of physical frames (at least 1).
            logger: Optional trace sink for hits, faults and evictions.

        Returns:
            The total fault count.

        Raises:
            ValueError: If the limits or page numbers are out of range.

        """
        ...  # pragma: no cover


def prepare_requests(requests: Sequence[int], page_count: int, frame_count: int) -> list[int]:
    """Validate the simulation inputs and return the normalized requests.

    Raises:
        ValueError: If *frame_count* is below 1, *page_count* is negative,
            or any page number is negative.

    """
    if frame_count < 1:
        msg = f"Frame count must be at least 1, got {frame_count}"
        raise ValueError(msg)
    if page_count < 0:
        msg = f"Page count must be non-negative, got {page_count}"
        raise ValueError(msg)
    cleaned = normalize(requests)
    negative = [page for page in cleaned if page < 0]
    if negative:
        msg = f"Page numbers must be non-negative, got {negative[0]}"
        raise ValueError(msg)
    return cleaned


def _trace(logger: Logger | None, message: str, *, source: str, step: int) -> None:
    """Record a per-request DEBUG entry if a logger was supplied."""
    if logger is not None:
        logger.log(LogLevel.DEBUG, message, source=source, step=step)


def _summarize(logger: Logger | None, faults: int, requests: int, *, source: str) -> None:
    """Record the INFO summary entry for one run."""
    if logger is not None:
        logger.log(
            LogLevel.INFO,
            f"{faults} fault(s) over {requests} request(s)",
            source=source,
        )


# ---------------------------------------------------------------------------
# FIFO Policy
# ---------------------------------------------------------------------------


class FIFOPolicy:
    """First In, First Out — evict the oldest loaded page.

    Uses a deque as the queue.  The left end is always the page that
    has been resident the longest; hits never change the order.
    """

    @property
    def kind(self) -> PolicyKind:
        """Return ``PolicyKind.FIFO``."""
        return PolicyKind.FIFO

    def compute_faults(
        self,
        requests: Sequence[int],
        page_count: int,
        frame_count: int,
        *,
        logger: Logger | None = None,
    ) -> int:
        """Simulate FIFO replacement and return the fault count."""
        sequence = prepare_requests(requests, page_count, frame_count)
        source = str(self.kind)
        resident: deque[int] = deque()
        faults = 0

        for step, page in enumerate(sequence):
            if contains(page, resident):
                _trace(logger, f"hit {page}", source=source, step=step)
                continue

            faults += 1
            if len(resident) == frame_count:
                victim = resident.popleft()
                _trace(logger, f"fault {page}, evict {victim}", source=source, step=step)
            else:
                _trace(logger, f"fault {page}", source=source, step=step)
            resident.append(page)

        _summarize(logger, faults, len(sequence), source=source)
        return faults


# ---------------------------------------------------------------------------
# LRU Policy
# ---------------------------------------------------------------------------


class LRUPolicy:
    """Least Recently Used — evict the page accessed longest ago.

    Uses an OrderedDict for O(1) move-to-end on a hit.  The first key
    is always the least recently used page; no timestamps are kept.
    """

    @property
    def kind(self) -> PolicyKind:
        """Return ``PolicyKind.LRU``."""
        return PolicyKind.LRU

    def compute_faults(
        self,
        requests: Sequence[int],
        page_count: int,
        frame_count: int,
        *,
        logger: Logger | None = None,
    ) -> int:
        """Simulate LRU replacement and return the fault count."""
        sequence = prepare_requests(requests, page_count, frame_count)
        source = str(self.kind)
        resident: OrderedDict[int, None] = OrderedDict()
        faults = 0

        for step, page in enumerate(sequence):
            if contains(page, resident):
                resident.move_to_end(page)
                _trace(logger, f"hit {page}", source=source, step=step)
                continue

            faults += 1
            if len(resident) == frame_count:
                victim, _ = resident.popitem(last=False)
                _trace(logger, f"fault {page}, evict {victim}", source=source, step=step)
            else:
                _trace(logger, f"fault {page}", source=source, step=step)
            resident[page] = None

        _summarize(logger, faults, len(sequence), source=source)
        return faults


# ---------------------------------------------------------------------------
# OPT Policy
# ---------------------------------------------------------------------------


class OPTPolicy:
    """Optimal (Belady) — evict the page needed furthest in the future.

    The resident set grows until it holds ``page_count`` pages (the
    process's whole address space) or fills every frame, whichever comes
    first.  After that each fault looks ahead through the remaining
    requests to choose a victim.  A ``page_count`` of 0 means the address
    space size is unknown, and only ``frame_count`` limits growth.

    The resident set is a plain list; its insertion order breaks ties
    between pages that are never referenced again.
    """

    @property
    def kind(self) -> PolicyKind:
        """Return ``PolicyKind.OPT``."""
        return PolicyKind.OPT

    @staticmethod
    def growth_limit(page_count: int, frame_count: int) -> int:
        """Return the resident-set size at which eviction starts."""
        if page_count == 0:
            return frame_count
        return min(page_count, frame_count)

    @staticmethod
    def select_victim(resident: Sequence[int], sequence: Sequence[int], step: int) -> int:
        """Choose which resident page to evict at position *step*.

        Scans forward from *step* collecting resident pages in order of
        their next use.  If every resident page shows up, the last one
        collected is needed furthest away.  Otherwise the first resident
        page (in insertion order) that never shows up is returned.

        Args:
            resident: The current resident set (must be non-empty).
            sequence: The full normalized reference string.
            step: Index of the request that faulted.

        Returns:
            The page number to evict.

        """
        upcoming: list[int] = []
        for future in sequence[step:]:
            if contains(future, resident) and not contains(future, upcoming):
                upcoming.append(future)
                if len(upcoming) == len(resident):
                    break

        if len(upcoming) == len(resident):
            return upcoming[-1]
        return next(page for page in resident if not contains(page, upcoming))

    def compute_faults(
        self,
        requests: Sequence[int],
        page_count: int,
        frame_count: int,
        *,
        logger: Logger | None = None,
    ) -> int:
        """Simulate optimal replacement and return the fault count."""
        sequence = prepare_requests(requests, page_count, frame_count)
        source = str(self.kind)
        limit = self.growth_limit(page_count, frame_count)
        resident: list[int] = []
        faults = 0

        for step, page in enumerate(sequence):
            if contains(page, resident):
                _trace(logger, f"hit {page}", source=source, step=step)
                continue

            faults += 1
            if len(resident) >= limit:
                victim = self.select_victim(resident, sequence, step)
                resident.remove(victim)
                _trace(logger, f"fault {page}, evict {victim}", source=source, step=step)
            else:
                _trace(logger, f"fault {page}", source=source, step=step)
            resident.append(page)

        _summarize(logger, faults, len(sequence), source=source)
        return faults


# ---------------------------------------------------------------------------
# Selection helpers
# ---------------------------------------------------------------------------

_POLICIES: dict[PolicyKind, type[FIFOPolicy | LRUPolicy | OPTPolicy]] = {
    PolicyKind.FIFO: FIFOPolicy,
    PolicyKind.LRU: LRUPolicy,
    PolicyKind.OPT: OPTPolicy,
}


def get_policy(kind: PolicyKind | str) -> ReplacementPolicy:
    """Return a policy instance for *kind*.

    Accepts a ``PolicyKind`` or its name in any case (``"LRU"``, ``"lru"``).

    Raises:
        ValueError: If *kind* does not name a known policy.

    """
    try:
        tag = PolicyKind(kind.lower())
    except ValueError:
        choices = ", ".join(str(k) for k in PolicyKind)
        msg = f"Unknown policy {kind!r} (expected one of: {choices})"
        raise ValueError(msg) from None
    return _POLICIES[tag]()


def compute_faults(
    kind: PolicyKind | str,
    requests: Sequence[int],
    page_count: int,
    frame_count: int,
    *,
    logger: Logger | None = None,
) -> int:
    """Count the faults *requests* causes under the policy named by *kind*."""
    return get_policy(kind).compute_faults(requests, page_count, frame_count, logger=logger)


def compare_policies(
    requests: Sequence[int],
    page_count: int,
    frame_count: int,
) -> dict[PolicyKind, int]:
    """Run every policy on the same inputs and return their fault counts."""
    return {kind: compute_faults(kind, requests, page_count, frame_count) for kind in PolicyKind}
