"""channels/__init__.py"""
from .registry import ChannelRegistry, MemberIndex, Membership

__all__ = ["ChannelRegistry", "MemberIndex", "Membership"]
