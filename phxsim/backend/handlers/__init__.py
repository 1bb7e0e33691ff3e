"""handlers/__init__.py"""
from .base import BaseHandler
from .echo import EchoHandler
from .generic import GenericHandler
from .heartbeat import HeartbeatHandler
from .join import JoinHandler
from .leave import LeaveHandler

__all__ = [
    "BaseHandler",
    "HeartbeatHandler",
    "JoinHandler",
    "LeaveHandler",
    "EchoHandler",
    "GenericHandler",
]
