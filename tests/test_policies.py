"""Tests for page replacement policies.

When every frame is full and a program touches a page that is not
resident, the OS must evict something.  The replacement policy picks
the victim; the number of faults over a reference string is how
policies are compared.

Components tested:
    - **FIFO**: evict the oldest page (simple, but Belady's anomaly).
    - **LRU**: evict the least recently used page.
    - **OPT**: evict the page needed furthest in the future (optimal).
    - **Selection helpers**: ``get_policy``, ``compute_faults``,
      ``compare_policies``.
"""

import random

import pytest

from py_pager.logging import Logger, LogLevel
from py_pager.policies import (
    FIFOPolicy,
    LRUPolicy,
    OPTPolicy,
    PolicyKind,
    ReplacementPolicy,
    compare_policies,
    compute_faults,
    get_policy,
)
from py_pager.refstring import generate, normalize

# The reference string preloaded by the simulator front ends.
CLASSIC = [1, 2, 3, 4, 2, 1, 5, 6, 2, 1, 2, 3, 7, 6, 3, 2, 1, 2, 3, 6]
CLASSIC_PAGES = 9

# Reference string that exposes Belady's anomaly under FIFO.
BELADY = [1, 2, 3, 4, 1, 2, 5, 1, 2, 3, 4, 5]

ALL_POLICIES = [FIFOPolicy(), LRUPolicy(), OPTPolicy()]
SEEDS = range(20)


def _random_string(seed: int, *, length: int = 30, pages: int = 6) -> list[int]:
    """Return a reproducible random reference string."""
    return generate(length, pages, rng=random.Random(seed))


# -- Regression baselines ------------------------------------------------------


class TestClassicReferenceString:
    """Pin fault counts for the classic 20-request reference string."""

    @pytest.mark.parametrize(
        ("kind", "frames", "expected"),
        [
            (PolicyKind.FIFO, 7, 7),
            (PolicyKind.LRU, 7, 7),
            (PolicyKind.OPT, 7, 7),
            (PolicyKind.FIFO, 3, 16),
            (PolicyKind.LRU, 3, 15),
            (PolicyKind.OPT, 3, 11),
            (PolicyKind.FIFO, 1, 20),
            (PolicyKind.LRU, 1, 20),
            (PolicyKind.OPT, 1, 20),
        ],
    )
    def test_fault_count(self, kind: PolicyKind, frames: int, expected: int) -> None:
        """Each policy should produce its known fault count."""
        assert compute_faults(kind, CLASSIC, CLASSIC_PAGES, frames) == expected

    def test_belady_anomaly_under_fifo(self) -> None:
        """FIFO faults more with 4 frames than with 3 on this string."""
        fifo = FIFOPolicy()
        assert fifo.compute_faults(BELADY, 5, 3) == 9
        assert fifo.compute_faults(BELADY, 5, 4) == 10

    def test_lru_and_opt_on_belady_string(self) -> None:
        """LRU and OPT improve as frames are added."""
        assert LRUPolicy().compute_faults(BELADY, 5, 3) == 10
        assert LRUPolicy().compute_faults(BELADY, 5, 4) == 8
        assert OPTPolicy().compute_faults(BELADY, 5, 3) == 7
        assert OPTPolicy().compute_faults(BELADY, 5, 4) == 6


# -- Edge cases shared by every policy ------------------------------------------


class TestCommonBehaviour:
    """Verify behaviour every policy must share."""

    @pytest.mark.parametrize("policy", ALL_POLICIES, ids=lambda p: str(p.kind))
    def test_empty_string_has_no_faults(self, policy: ReplacementPolicy) -> None:
        """No requests means no faults, whatever the limits."""
        assert policy.compute_faults([], 0, 1) == 0
        assert policy.compute_faults([], 9, 7) == 0

    @pytest.mark.parametrize("policy", ALL_POLICIES, ids=lambda p: str(p.kind))
    def test_repeated_page_faults_once(self, policy: ReplacementPolicy) -> None:
        """``[1, 1, 1, 1]`` normalizes to ``[1]`` — a single fault."""
        assert policy.compute_faults([1, 1, 1, 1], 9, 1) == 1

    @pytest.mark.parametrize("policy", ALL_POLICIES, ids=lambda p: str(p.kind))
    def test_input_is_normalized(self, policy: ReplacementPolicy) -> None:
        """Adjacent repeats should not change the fault count."""
        raw = [1, 1, 2, 2, 3, 3, 1, 1]
        assert policy.compute_faults(raw, 9, 2) == policy.compute_faults(normalize(raw), 9, 2)

    @pytest.mark.parametrize("policy", ALL_POLICIES, ids=lambda p: str(p.kind))
    def test_input_not_mutated(self, policy: ReplacementPolicy) -> None:
        """The caller's reference string is left untouched."""
        raw = [2, 2, 3]
        policy.compute_faults(raw, 9, 1)
        assert raw == [2, 2, 3]

    @pytest.mark.parametrize("policy", ALL_POLICIES, ids=lambda p: str(p.kind))
    def test_zero_frames_raises(self, policy: ReplacementPolicy) -> None:
        """A frame count below 1 is a precondition violation."""
        with pytest.raises(ValueError, match="Frame count"):
            policy.compute_faults([1, 2], 9, 0)

    @pytest.mark.parametrize("policy", ALL_POLICIES, ids=lambda p: str(p.kind))
    def test_negative_pages_raises(self, policy: ReplacementPolicy) -> None:
        """A negative page count is rejected."""
        with pytest.raises(ValueError, match="Page count"):
            policy.compute_faults([1, 2], -1, 3)

    @pytest.mark.parametrize("policy", ALL_POLICIES, ids=lambda p: str(p.kind))
    def test_negative_page_number_raises(self, policy: ReplacementPolicy) -> None:
        """Page numbers must be non-negative."""
        with pytest.raises(ValueError, match="Page numbers"):
            policy.compute_faults([1, -2], 9, 3)

    @pytest.mark.parametrize("policy", ALL_POLICIES, ids=lambda p: str(p.kind))
    def test_policy_is_reusable(self, policy: ReplacementPolicy) -> None:
        """No state leaks from one call to the next."""
        first = policy.compute_faults(CLASSIC, CLASSIC_PAGES, 3)
        second = policy.compute_faults(CLASSIC, CLASSIC_PAGES, 3)
        assert first == second


# -- FIFO Policy --------------------------------------------------------------


class TestFIFOPolicy:
    """Verify FIFO (First In, First Out) page replacement.

    FIFO always evicts the page that has been in memory the longest.
    Re-accessing a page does not protect it.
    """

    def test_hit_does_not_refresh(self) -> None:
        """Page 1 is evicted first even though it was just reused."""
        # 1F 2F 1hit 3F(evict 1) 1F(evict 2)
        assert FIFOPolicy().compute_faults([1, 2, 1, 3, 1], 9, 2) == 4

    def test_enough_frames_faults_once_per_page(self) -> None:
        """With a frame per distinct page, each page faults exactly once."""
        distinct = len(set(CLASSIC))
        assert FIFOPolicy().compute_faults(CLASSIC, CLASSIC_PAGES, distinct) == distinct

    @pytest.mark.parametrize("seed", SEEDS)
    def test_frames_at_least_distinct_count(self, seed: int) -> None:
        """Faults equal the distinct count once nothing needs evicting."""
        sequence = _random_string(seed)
        distinct = len(set(sequence))
        assert FIFOPolicy().compute_faults(sequence, 6, distinct) == distinct
        assert FIFOPolicy().compute_faults(sequence, 6, distinct + 2) == distinct

    def test_kind(self) -> None:
        """The policy reports its tag."""
        assert FIFOPolicy().kind is PolicyKind.FIFO


# -- LRU Policy ---------------------------------------------------------------


class TestLRUPolicy:
    """Verify LRU (Least Recently Used) page replacement.

    LRU evicts the page that hasn't been accessed for the longest time.
    It is a stack algorithm, so it never suffers from Belady's anomaly.
    """

    def test_hit_refreshes_recency(self) -> None:
        """Reusing page 1 makes page 2 the victim instead."""
        # 1F 2F 1hit 3F(evict 2) 1hit
        assert LRUPolicy().compute_faults([1, 2, 1, 3, 1], 9, 2) == 3

    def test_enough_frames_faults_once_per_page(self) -> None:
        """With a frame per distinct page, each page faults exactly once."""
        distinct = len(set(CLASSIC))
        assert LRUPolicy().compute_faults(CLASSIC, CLASSIC_PAGES, distinct) == distinct

    @pytest.mark.parametrize("seed", SEEDS)
    def test_more_frames_never_more_faults(self, seed: int) -> None:
        """Fault counts are non-increasing as frames are added."""
        sequence = _random_string(seed)
        counts = [LRUPolicy().compute_faults(sequence, 6, f) for f in range(1, 7)]
        assert counts == sorted(counts, reverse=True)

    def test_kind(self) -> None:
        """The policy reports its tag."""
        assert LRUPolicy().kind is PolicyKind.LRU


# -- OPT Policy ---------------------------------------------------------------


class TestOPTPolicy:
    """Verify OPT (Belady's optimal) page replacement.

    OPT looks ahead through the reference string and evicts the page
    whose next use is furthest away, or one that is never used again.
    """

    def test_evicts_furthest_next_use(self) -> None:
        """When every resident page is reused, the last one reused goes."""
        victim = OPTPolicy.select_victim([1, 2, 3], [4, 3, 1, 2], 0)
        assert victim == 2

    def test_evicts_page_never_used_again(self) -> None:
        """A page with no future use is evicted before any reused page."""
        victim = OPTPolicy.select_victim([1, 2, 3], [4, 2, 5, 1], 0)
        assert victim == 3

    def test_tie_break_is_insertion_order(self) -> None:
        """Among unused pages the earliest inserted is chosen."""
        victim = OPTPolicy.select_victim([1, 2, 3], [4, 3], 0)
        assert victim == 1

    def test_scan_starts_at_step(self) -> None:
        """Requests before the current position are ignored."""
        victim = OPTPolicy.select_victim([1, 2], [1, 2, 3, 1], 2)
        assert victim == 2

    def test_growth_limit(self) -> None:
        """Eviction starts at the smaller of page and frame counts."""
        assert OPTPolicy.growth_limit(9, 3) == 3
        assert OPTPolicy.growth_limit(2, 3) == 2
        assert OPTPolicy.growth_limit(0, 3) == 3

    def test_small_address_space_forces_early_eviction(self) -> None:
        """With 2 pages the resident set never grows past 2."""
        sequence = [1, 2, 3, 1, 2, 3]
        assert OPTPolicy().compute_faults(sequence, 2, 3) == 4
        assert OPTPolicy().compute_faults(sequence, 9, 3) == 3

    def test_zero_page_count_uses_frames(self) -> None:
        """A page count of 0 leaves only the frame count as the limit."""
        assert OPTPolicy().compute_faults([1, 2, 3, 1, 2, 3], 0, 3) == 3

    def test_frames_cap_resident_set(self) -> None:
        """A large address space still cannot exceed the frame count."""
        assert OPTPolicy().compute_faults([1, 2, 3, 1, 2, 3], 9, 2) == 4

    def test_small_address_space_can_lose_to_fifo(self) -> None:
        """Optimality only holds when the page count allows every frame.

        With 2 pages OPT keeps at most 2 pages resident, while FIFO and
        LRU fill all 3 frames.
        """
        sequence = [1, 2, 3, 1, 2, 3]
        assert OPTPolicy().compute_faults(sequence, 2, 3) == 4
        assert FIFOPolicy().compute_faults(sequence, 2, 3) == 3
        assert LRUPolicy().compute_faults(sequence, 2, 3) == 3

    @pytest.mark.parametrize("seed", SEEDS)
    def test_never_worse_than_fifo_or_lru(self, seed: int) -> None:
        """OPT is optimal: no policy beats it on the same inputs."""
        sequence = _random_string(seed)
        for frames in range(1, 7):
            opt = OPTPolicy().compute_faults(sequence, 6, frames)
            assert opt <= FIFOPolicy().compute_faults(sequence, 6, frames)
            assert opt <= LRUPolicy().compute_faults(sequence, 6, frames)

    @pytest.mark.parametrize("seed", SEEDS)
    def test_more_frames_never_more_faults(self, seed: int) -> None:
        """OPT has no Belady's anomaly."""
        sequence = _random_string(seed)
        counts = [OPTPolicy().compute_faults(sequence, 6, f) for f in range(1, 7)]
        assert counts == sorted(counts, reverse=True)

    def test_kind(self) -> None:
        """The policy reports its tag."""
        assert OPTPolicy().kind is PolicyKind.OPT


# -- Trace logging --------------------------------------------------------------


class TestTraceLogging:
    """Verify the optional per-request trace."""

    def test_fifo_trace(self) -> None:
        """Hits, faults and evictions are logged with their step."""
        logger = Logger()
        FIFOPolicy().compute_faults([1, 2, 1, 3], 9, 2, logger=logger)
        debug = [str(e) for e in logger.filter(source="fifo") if e.level is LogLevel.DEBUG]
        assert debug == [
            "[DEBUG] fifo@0: fault 1",
            "[DEBUG] fifo@1: fault 2",
            "[DEBUG] fifo@2: hit 1",
            "[DEBUG] fifo@3: fault 3, evict 1",
        ]

    def test_summary_entry(self) -> None:
        """Each run ends with one INFO summary."""
        logger = Logger()
        LRUPolicy().compute_faults([1, 2, 1, 3], 9, 2, logger=logger)
        summary = logger.filter(min_level=LogLevel.INFO)
        assert [e.message for e in summary] == ["3 fault(s) over 4 request(s)"]

    def test_opt_logs_eviction(self) -> None:
        """OPT names the page it evicted."""
        logger = Logger()
        OPTPolicy().compute_faults([1, 2, 3, 1], 9, 2, logger=logger)
        messages = [e.message for e in logger.entries]
        assert "fault 3, evict 2" in messages


# -- Selection helpers ----------------------------------------------------------


class TestSelection:
    """Verify policy lookup and the convenience functions."""

    @pytest.mark.parametrize("name", ["fifo", "LRU", "Opt"])
    def test_get_policy_by_name(self, name: str) -> None:
        """Names are matched case-insensitively."""
        assert get_policy(name).kind == name.lower()

    def test_get_policy_by_kind(self) -> None:
        """A PolicyKind selects the matching class."""
        assert isinstance(get_policy(PolicyKind.OPT), OPTPolicy)

    def test_unknown_policy_raises(self) -> None:
        """Unknown names list the valid choices."""
        with pytest.raises(ValueError, match="expected one of: fifo, lru, opt"):
            get_policy("clock")

    def test_compare_policies(self) -> None:
        """Every policy is run on the same inputs."""
        results = compare_policies(CLASSIC, CLASSIC_PAGES, 3)
        assert results == {PolicyKind.FIFO: 16, PolicyKind.LRU: 15, PolicyKind.OPT: 11}

    def test_compute_faults_passes_logger(self) -> None:
        """The logger reaches the selected policy."""
        logger = Logger()
        compute_faults("lru", [1, 2], 9, 1, logger=logger)
        assert logger.filter(source="lru")
