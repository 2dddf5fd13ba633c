"""Interactive REPL (Read-Eval-Print Loop) for the simulator.

The REPL is the terminal front end.  It creates a session and a shell,
then loops:

    1. **Read** — display a prompt and read user input.
    2. **Eval** — pass the command to ``shell.execute()``.
    3. **Print** — display the result.
    4. **Loop** — repeat until the shell returns the exit sentinel.

The helpers (``format_banner``, ``build_prompt``) are pure and
testable.  ``run()`` is the I/O entrypoint and the ``py-pager``
console script.
"""

from py_pager.session import Session
from py_pager.shell import Shell

_BANNER_WIDTH = 38


def format_banner(session: Session) -> str:
    """Format the start-up banner with the session's initial inputs."""
    border = "=" * _BANNER_WIDTH
    header = f"\n  {border}\n          py-pager v0.1.0\n   Page replacement simulator\n  {border}\n\n"
    body = (
        f"  reference: {session.reference}\n"
        f"  pages: {session.pages}  frames: {session.frames}  policy: {session.policy}\n"
    )
    footer = "\nType 'help' for commands, 'calc' to count faults, 'exit' to quit.\n"
    return header + body + footer


def build_prompt(session: Session) -> str:
    """Build a prompt like ``lru/3 $ `` showing policy and frame count."""
    return f"{session.policy}/{session.frames} $ "


def run() -> None:
    """Run the interactive simulator until ``exit``, Ctrl+D or Ctrl+C."""
    session = Session()
    shell = Shell(session=session)

    print(format_banner(session))  # noqa: T201

    try:
        while True:
            try:
                command = input(build_prompt(session))
            except EOFError:
                # Ctrl+D — graceful exit
                print()  # noqa: T201
                break

            result = shell.execute(command)
            if result == Shell.EXIT_SENTINEL:
                break
            if result:
                print(result)  # noqa: T201

    except KeyboardInterrupt:
        # Ctrl+C — graceful exit
        print("\nInterrupted.")  # noqa: T201
