"""
CourseHub client core.

Async session state and API access for front ends talking to the
CourseHub API.
"""

from coursehub.client.api_client import CourseHubClient
from coursehub.client.app_state import AppState, create_app_state
from coursehub.client.errors import NetworkError
from coursehub.client.notifier import Notifier, LoggingNotifier
from coursehub.client.scheduler import Scheduler, AsyncioScheduler
from coursehub.client.user_loader import UserRecordLoader, LoaderState

__all__ = [
    "CourseHubClient",
    "AppState",
    "create_app_state",
    "NetworkError",
    "Notifier",
    "LoggingNotifier",
    "Scheduler",
    "AsyncioScheduler",
    "UserRecordLoader",
    "LoaderState",
]
