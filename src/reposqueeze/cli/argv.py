"""
Rewrites sys.argv into a shape Typer accepts.

- ``reposqueeze --version`` becomes ``reposqueeze version``
- ``reposqueeze help create-from-local`` becomes ``reposqueeze create-from-local --help``
- ``--debug`` anywhere on the line is moved in front of the subcommand
"""

_HOISTED_FLAGS = ("--debug",)


def preprocess_argv(argv: list[str]) -> list[str]:
    """Return a normalized copy of ``argv`` (without the program name)."""
    if not argv:
        return argv

    first = argv[0]
    if first in ("--version", "-V"):
        return ["version"]

    if first == "help":
        target = next((arg for arg in argv[1:] if arg != "help" and not arg.startswith("-")), None)
        return [target, "--help"] if target else ["--help"]

    flags = [flag for flag in _HOISTED_FLAGS if flag in argv]
    remaining = [arg for arg in argv if arg not in _HOISTED_FLAGS]
    return flags + remaining
