from .api_server_shutdown_handler import APIServerShutdownHandler
from .task_cancellation_handler import TaskCancellationHandler
from .udp_shutdown_handler import UDPShutdownHandler

__all__ = [
    "APIServerShutdownHandler",
    "TaskCancellationHandler",
    "UDPShutdownHandler",
]
