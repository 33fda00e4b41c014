class RuleDeployError(Exception):
    """Base class for errors raised while deploying rules."""


class UsageError(RuleDeployError, ValueError):
    """Raised when the requested rule names are unusable (none given, duplicates)."""


class RuleNotFoundError(RuleDeployError, FileNotFoundError):
    """Raised when one or more requested rule files do not exist."""

    def __init__(self, names: list[str], paths: list[str]) -> None:
        self.names = names
        self.paths = paths
        if len(paths) == 1:
            msg = f"Source file '{paths[0]}' not found"
        else:
            joined = ", ".join(f"'{p}'" for p in paths)
            msg = f"Source files not found: {joined}"
        super().__init__(msg)


class DeploymentError(RuleDeployError, OSError):
    """Raised when writing the output directory fails."""
