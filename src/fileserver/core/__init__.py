"""
Transport layer: listening socket, per-client connections, worker threads.

Nothing in here knows about HTTP beyond "a request header block ends with
\\r\\n\\r\\n".
"""

from .connection import Connection, ConnectionState
from .socket_server import SocketServer
from .thread_pool import ThreadPool, Worker, WorkerState

__all__ = [
    "Connection",
    "ConnectionState",
    "SocketServer",
    "ThreadPool",
    "Worker",
    "WorkerState",
]
