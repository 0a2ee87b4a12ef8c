from pipeline_harness.exceptions import (
    HarnessError,
    ConfigurationError,
    UserIdentityError,
    ToolNotFoundError,
    LaunchError,
)

__all__ = [
    'HarnessError',
    'ConfigurationError',
    'UserIdentityError',
    'ToolNotFoundError',
    'LaunchError',
]
