"""
Pipeline harness exception hierarchy.

All harness-specific exceptions inherit from HarnessError.
"""

class HarnessError(Exception):
    """Base exception for all harness errors."""
    pass


class ConfigurationError(HarnessError):
    """Error in harness configuration."""
    pass


class UserIdentityError(HarnessError):
    """The invoking user's uid/gid could not be determined."""
    pass


class ToolNotFoundError(HarnessError):
    """An external executable is not on PATH."""

    def __init__(self, tool):
        super().__init__(f"{tool}: command not found")
        self.tool = tool


class LaunchError(HarnessError):
    """An external executable was found but could not be started."""
    pass
