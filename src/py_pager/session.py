"""Session — the state behind one simulator front end.

A session holds the three inputs a user edits (reference string text,
page count, frame count) plus the selected policy, and turns them into
a fault count on request.  The shell, the REPL and the web API are thin
wrappers around it.

The reference string is kept as *text*, exactly as the user typed it
(or as ``generate`` produced it).  Text that does not parse is refused
when set, and the stored text is parsed again each time a calculation runs.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from py_pager.config import DEFAULT_CONFIG, ConfigError, SimulatorConfig
from py_pager.logging import Logger, LogLevel
from py_pager.policies import PolicyKind, compare_policies, get_policy
from py_pager.refstring import (
    format_reference_string,
    generate,
    parse_reference_string,
)

if TYPE_CHECKING:
    from collections.abc import Callable

_SOURCE = "session"


class Session:
    """Mutable simulator inputs with a calculate action.

    Args:
        config: Input bounds and defaults.
        rng: Random source used by ``generate``.

    """

    def __init__(
        self,
        *,
        config: SimulatorConfig = DEFAULT_CONFIG,
        rng: random.Random | None = None,
    ) -> None:
        """Create a session populated with the configured defaults."""
        self._config = config
        self._rng = rng if rng is not None else random.Random()
        self._logger = Logger()
        self._reference = config.default_reference
        self._pages = config.default_pages
        self._frames = config.default_frames
        self._policy = config.default_policy

    @property
    def config(self) -> SimulatorConfig:
        """Return the bounds this session enforces."""
        return self._config

    @property
    def logger(self) -> Logger:
        """Return the session's trace log."""
        return self._logger

    @property
    def reference(self) -> str:
        """Return the reference string text."""
        return self._reference

    @property
    def pages(self) -> int:
        """Return the page count."""
        return self._pages

    @property
    def frames(self) -> int:
        """Return the frame count."""
        return self._frames

    @property
    def policy(self) -> PolicyKind:
        """Return the selected policy."""
        return self._policy

    def requests(self) -> list[int]:
        """Return the page numbers parsed from the reference text."""
        return parse_reference_string(self._reference)

    def set_reference(self, text: str) -> list[int]:
        """Replace the reference string text if it parses.

        Returns:
            The page numbers parsed from *text*.

        Raises:
            ValueError: If *text* cannot be parsed (e.g. a page number
                too long to convert); the previous text is kept.

        """
        try:
            requests = parse_reference_string(text)
        except ValueError as exc:
            msg = f"Invalid reference string: {exc}"
            self._logger.log(LogLevel.WARNING, msg, source=_SOURCE)
            raise
        self._reference = text
        return requests

    def set_pages(self, pages: int) -> None:
        """Set the page count.

        Raises:
            ConfigError: If *pages* is out of bounds.

        """
        self._pages = self._checked(self._config.check_pages, pages)

    def set_frames(self, frames: int) -> None:
        """Set the frame count.

        Raises:
            ConfigError: If *frames* is out of bounds.

        """
        self._frames = self._checked(self._config.check_frames, frames)

    def set_policy(self, name: PolicyKind | str) -> None:
        """Select the policy used by ``calculate``.

        Raises:
            ValueError: If *name* is not a known policy.

        """
        try:
            self._policy = get_policy(name).kind
        except ValueError as exc:
            self._logger.log(LogLevel.WARNING, str(exc), source=_SOURCE)
            raise

    def generate(self) -> list[int]:
        """Replace the reference text with a random reference string.

        The string has ``generated_length`` requests drawn from the
        current page range ``[0, pages)``.

        Returns:
            The generated page numbers.

        Raises:
            ConfigError: If the page count is too small to draw from.

        """
        try:
            sequence = generate(self._config.generated_length, self._pages, rng=self._rng)
        except ValueError as exc:
            msg = f"Cannot generate a reference string with {self._pages} page(s): {exc}"
            self._logger.log(LogLevel.WARNING, msg, source=_SOURCE)
            raise ConfigError(msg) from exc
        self._reference = format_reference_string(sequence)
        self._logger.log(
            LogLevel.INFO,
            f"generated {len(sequence)} request(s) over {self._pages} page(s)",
            source=_SOURCE,
        )
        return sequence

    def calculate(self) -> int:
        """Return the fault count for the current inputs and policy."""
        faults = get_policy(self._policy).compute_faults(
            self.requests(), self._pages, self._frames, logger=self._logger
        )
        self._logger.log(
            LogLevel.INFO,
            f"{self._policy} with {self._frames} frame(s), {self._pages} page(s): "
            f"{faults} fault(s)",
            source=_SOURCE,
        )
        return faults

    def compare(self) -> dict[PolicyKind, int]:
        """Return the fault count of every policy for the current inputs."""
        return compare_policies(self.requests(), self._pages, self._frames)

    @staticmethod
    def describe(faults: int) -> str:
        """Return the sentence shown to the user for a fault count."""
        return f"This configuration will give {faults} page fault(s)"

    def _checked(self, check: Callable[[int], int], value: int) -> int:
        """Run a bound check, logging the rejection before re-raising."""
        try:
            return check(value)
        except ConfigError as exc:
            self._logger.log(LogLevel.WARNING, str(exc), source=_SOURCE)
            raise
