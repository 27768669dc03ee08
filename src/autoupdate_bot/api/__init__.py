"""Remote update-set service boundary."""

from autoupdate_bot.api.base import UpdateSetClient
from autoupdate_bot.api.client import DEFAULT_API_ENDPOINT, GemnasiumClient
from autoupdate_bot.api.exceptions import ApiConflictError, ApiError

__all__ = [
    "ApiConflictError",
    "ApiError",
    "DEFAULT_API_ENDPOINT",
    "GemnasiumClient",
    "UpdateSetClient",
]
