"""
Confirm-then-dispatch commands.
"""

from .pending import CommandQueue, CommandState, PendingCommand

__all__ = ["CommandQueue", "CommandState", "PendingCommand"]
