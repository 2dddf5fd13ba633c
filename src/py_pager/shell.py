"""The shell — command interpreter for the simulator.

The shell reads a command string, splits it into a command name and
arguments, dispatches to the matching handler, and returns a string.
Every handler works through a ``Session``; the shell itself holds no
simulation state.

Design choices:
    - **Returns strings, not prints.**  This keeps the shell fully
      testable and leaves display to the caller (the REPL).
    - **Command dispatch via a dict.**  Adding a command means writing
      a method and adding one dict entry.
    - **User errors are output, not exceptions.**  Bad input produces
      an ``Error: ...`` line so the REPL loop never dies on a typo.
"""

from collections.abc import Callable
from typing import TypeAlias

from py_pager.logging import LogLevel
from py_pager.policies import PolicyKind
from py_pager.refstring import format_reference_string
from py_pager.session import Session

# Type alias for a command handler: takes a list of args, returns output.
_Handler: TypeAlias = Callable[[list[str]], str]

_USAGE: dict[str, str] = {
    "ref": "Usage: ref <page> [page ...]",
    "pages": "Usage: pages <count>",
    "frames": "Usage: frames <count>",
    "policy": "Usage: policy <" + "|".join(str(k) for k in PolicyKind) + ">",
}


class Shell:
    """Command interpreter bound to one session."""

    EXIT_SENTINEL = "__EXIT__"

    def __init__(self, *, session: Session) -> None:
        """Create a shell that drives *session*."""
        self._session = session

        # Command dispatch table — maps command names to handler methods.
        self._commands: dict[str, _Handler] = {
            "help": self._cmd_help,
            "show": self._cmd_show,
            "ref": self._cmd_ref,
            "pages": self._cmd_pages,
            "frames": self._cmd_frames,
            "policy": self._cmd_policy,
            "generate": self._cmd_generate,
            "calc": self._cmd_calc,
            "compare": self._cmd_compare,
            "log": self._cmd_log,
            "exit": self._cmd_exit,
        }

    @property
    def session(self) -> Session:
        """Return the session this shell drives."""
        return self._session

    @property
    def command_names(self) -> list[str]:
        """Return the available command names, sorted."""
        return sorted(self._commands)

    def execute(self, command: str) -> str:
        """Parse and execute a single command.

        Args:
            command: The raw command string (e.g. ``"frames 3"``).

        Returns:
            The command output, or an error message.

        """
        parts = command.split()
        if not parts:
            return ""

        name = parts[0]
        args = parts[1:]

        handler = self._commands.get(name)
        if handler is None:
            return f"Unknown command: {name}"

        try:
            return handler(args)
        except ValueError as exc:
            return f"Error: {exc}"

    # -- Command handlers ------------------------------------------------

    def _cmd_help(self, _args: list[str]) -> str:
        """List available commands."""
        return "Available commands: " + ", ".join(self.command_names)

    def _cmd_show(self, _args: list[str]) -> str:
        """Show the current inputs."""
        s = self._session
        return "\n".join(
            [
                f"reference: {s.reference}",
                f"pages:     {s.pages}",
                f"frames:    {s.frames}",
                f"policy:    {s.policy}",
            ]
        )

    def _cmd_ref(self, args: list[str]) -> str:
        """Show or replace the reference string."""
        if not args:
            return self._session.reference
        requests = self._session.set_reference(" ".join(args))
        if not requests:
            return "Reference string is empty"
        return f"Reference string: {format_reference_string(requests)}"

    def _cmd_pages(self, args: list[str]) -> str:
        """Show or set the page count."""
        if not args:
            return str(self._session.pages)
        if len(args) != 1 or not args[0].isdigit():
            return _USAGE["pages"]
        self._session.set_pages(int(args[0]))
        return f"Page count set to {self._session.pages}"

    def _cmd_frames(self, args: list[str]) -> str:
        """Show or set the frame count."""
        if not args:
            return str(self._session.frames)
        if len(args) != 1 or not args[0].isdigit():
            return _USAGE["frames"]
        self._session.set_frames(int(args[0]))
        return f"Frame count set to {self._session.frames}"

    def _cmd_policy(self, args: list[str]) -> str:
        """Show or select the replacement policy."""
        if not args:
            return str(self._session.policy)
        if len(args) != 1:
            return _USAGE["policy"]
        self._session.set_policy(args[0])
        return f"Policy set to {self._session.policy}"

    def _cmd_generate(self, _args: list[str]) -> str:
        """Replace the reference string with a random one."""
        sequence = self._session.generate()
        return f"Reference string: {format_reference_string(sequence)}"

    def _cmd_calc(self, _args: list[str]) -> str:
        """Calculate page faults for the current inputs."""
        return self._session.describe(self._session.calculate())

    def _cmd_compare(self, _args: list[str]) -> str:
        """Show the fault count of every policy side by side."""
        results = self._session.compare()
        lines = ["POLICY  FAULTS"]
        lines.extend(f"{kind!s:<7} {faults}" for kind, faults in results.items())
        return "\n".join(lines)

    def _cmd_log(self, args: list[str]) -> str:
        """Show log entries; ``log all`` includes per-request DEBUG lines."""
        min_level = LogLevel.DEBUG if args[:1] == ["all"] else LogLevel.INFO
        entries = self._session.logger.filter(min_level=min_level)
        return "\n".join(str(e) for e in entries) if entries else "No log entries."

    def _cmd_exit(self, _args: list[str]) -> str:
        """Signal the REPL to stop."""
        return self.EXIT_SENTINEL
