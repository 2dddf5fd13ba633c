"""Reference strings — the page-request timeline a policy consumes.

A reference string is the ordered list of page numbers a program
touches.  Before it reaches a replacement policy it is **normalized**:
a request for the page that was just requested can never fault (the
page is still resident), so back-to-back repeats are collapsed.

This module provides:
    - ``normalize`` — collapse adjacent repeats, keeping the first of each run.
    - ``generate`` — random reference strings with no adjacent repeats.
    - ``parse_reference_string`` / ``format_reference_string`` — the
      text form used by the shell and the web API.

Design choices:
    - **Pure transforms** — ``normalize`` builds a new list and never
      touches its input, so callers can keep the raw trace around.
    - **Injectable RNG** — ``generate`` takes an optional
      ``random.Random`` so tests and demos can be reproducible.
"""

import random
import re
from collections.abc import Iterable

_DIGIT_RUN = re.compile(r"\d+")


def normalize(sequence: Iterable[int]) -> list[int]:
    """Return *sequence* with every adjacent repeat removed.

    In a run of equal values only the earliest element survives, so
    ``[1, 1, 2, 2, 2, 1]`` becomes ``[1, 2, 1]``.

    Args:
        sequence: The raw request trace (not modified).

    Returns:
        A new list in which no two neighbours are equal.

    """
    cleaned: list[int] = []
    for page in sequence:
        if cleaned and cleaned[-1] == page:
            continue
        cleaned.append(page)
    return cleaned


def generate(
    length: int,
    upper_bound: int,
    *,
    rng: random.Random | None = None,
) -> list[int]:
    """Generate a random reference string with no adjacent repeats.

    Each value is drawn uniformly from ``[0, upper_bound)``; a draw equal
    to the previous value is redrawn until it differs.

    Args:
        length: Number of requests to produce.
        upper_bound: Exclusive upper bound on page numbers.
        rng: Random source (defaults to the module-level generator).

    Returns:
        A list of *length* page numbers.

    Raises:
        ValueError: If *length* is negative, *upper_bound* is below 1,
            or a single-value range is asked for more than one request.

    """
    if length < 0:
        msg = f"Reference string length must be non-negative, got {length}"
        raise ValueError(msg)
    if upper_bound < 1:
        msg = f"Upper bound must be at least 1, got {upper_bound}"
        raise ValueError(msg)
    if upper_bound == 1 and length > 1:
        msg = "Cannot avoid adjacent repeats with a single possible page"
        raise ValueError(msg)

    source = rng if rng is not None else random
    sequence: list[int] = []
    for _ in range(length):
        page = source.randrange(upper_bound)
        while sequence and page == sequence[-1]:
            page = source.randrange(upper_bound)
        sequence.append(page)
    return sequence


def parse_reference_string(text: str) -> list[int]:
    """Extract page numbers from free-form text.

    Every run of decimal digits is one page number; anything else is a
    separator.  ``"1, 2, 3"``, ``"1 2 3"`` and ``"1;2;3"`` all parse to
    ``[1, 2, 3]``.  Signs are not recognised, so ``"-4"`` reads as ``4``.
    """
    return [int(token) for token in _DIGIT_RUN.findall(text)]


def format_reference_string(sequence: Iterable[int]) -> str:
    """Render a reference string as comma-separated numbers."""
    return ", ".join(str(page) for page in sequence)
