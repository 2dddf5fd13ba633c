"""Simulator bounds and defaults.

The drivers (shell, REPL, web API) collect three numbers from the user:
the reference string, the page count and the frame count.  The bounds
on those inputs live here in one frozen dataclass, so every driver
enforces the same limits and tests can build a wider configuration
without patching module globals.

The defaults describe a 10-page address space (pages 0-9) backed by up
to 7 frames, with the classic 20-request reference string preloaded.
"""

from dataclasses import dataclass

from py_pager.policies import PolicyKind


class ConfigError(ValueError):
    """Raised when a driver input falls outside the configured bounds."""


@dataclass(frozen=True)
class SimulatorConfig:
    """Input bounds and defaults shared by every driver.

    Attributes:
        min_frames: Smallest accepted frame count.
        max_frames: Largest accepted frame count.
        default_frames: Frame count a new session starts with.
        min_pages: Smallest accepted page count.
        max_pages: Largest accepted page count.
        default_pages: Page count a new session starts with.
        generated_length: Length of reference strings made by ``generate``.
        default_reference: Reference text a new session starts with.
        default_policy: Policy a new session starts with.

    """

    min_frames: int = 1
    max_frames: int = 7
    default_frames: int = 7
    min_pages: int = 0
    max_pages: int = 9
    default_pages: int = 9
    generated_length: int = 20
    default_reference: str = "1, 2, 3, 4, 2, 1, 5, 6, 2, 1, 2, 3, 7, 6, 3, 2, 1, 2, 3, 6"
    default_policy: PolicyKind = PolicyKind.FIFO

    def __post_init__(self) -> None:
        """Reject configurations whose bounds contradict each other."""
        if self.min_frames < 1:
            msg = f"min_frames must be at least 1, got {self.min_frames}"
            raise ConfigError(msg)
        if self.min_pages < 0:
            msg = f"min_pages must be non-negative, got {self.min_pages}"
            raise ConfigError(msg)
        if not self.min_frames <= self.default_frames <= self.max_frames:
            msg = (
                f"default_frames {self.default_frames} outside "
                f"[{self.min_frames}, {self.max_frames}]"
            )
            raise ConfigError(msg)
        if not self.min_pages <= self.default_pages <= self.max_pages:
            msg = (
                f"default_pages {self.default_pages} outside "
                f"[{self.min_pages}, {self.max_pages}]"
            )
            raise ConfigError(msg)
        if self.generated_length < 0:
            msg = f"generated_length must be non-negative, got {self.generated_length}"
            raise ConfigError(msg)

    def check_frames(self, frames: int) -> int:
        """Return *frames* if it is within bounds.

        Raises:
            ConfigError: If *frames* is outside ``[min_frames, max_frames]``.

        """
        if not self.min_frames <= frames <= self.max_frames:
            msg = f"Frame count must be between {self.min_frames} and {self.max_frames}"
            raise ConfigError(msg)
        return frames

    def check_pages(self, pages: int) -> int:
        """Return *pages* if it is within bounds.

        Raises:
            ConfigError: If *pages* is outside ``[min_pages, max_pages]``.

        """
        if not self.min_pages <= pages <= self.max_pages:
            msg = f"Page count must be between {self.min_pages} and {self.max_pages}"
            raise ConfigError(msg)
        return pages

    def as_dict(self) -> dict[str, object]:
        """Return the configuration as a JSON-friendly dict."""
        return {
            "frames": {
                "min": self.min_frames,
                "max": self.max_frames,
                "default": self.default_frames,
            },
            "pages": {
                "min": self.min_pages,
                "max": self.max_pages,
                "default": self.default_pages,
            },
            "generated_length": self.generated_length,
            "default_reference": self.default_reference,
            "default_policy": str(self.default_policy),
            "policies": [str(kind) for kind in PolicyKind],
        }


DEFAULT_CONFIG = SimulatorConfig()
