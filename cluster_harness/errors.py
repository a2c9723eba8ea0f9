"""
Error types raised by the harness.

Every error wraps the error that caused it. ``str()`` renders the whole chain
as ``"<context>: <cause>"`` so a failing test shows where the failure started.
"""
from typing import List, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .models import NodeConfig


class HarnessError(Exception):
    """Base error for all harness failures"""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message}: {self.cause}"


class AllocationError(HarnessError):
    """
    Port resolution, listen or close failed.

    When only the close failed, ``port`` holds the number that was obtained.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None, port: Optional[int] = None):
        super().__init__(message, cause)
        self.port = port


class ConfigError(HarnessError):
    """Assembling a node configuration failed"""


class StartError(HarnessError):
    """A node failed to start during cluster construction"""

    def __init__(self, message: str, cause: Optional[BaseException] = None,
                 index: int = 0, size: int = 0, config: Optional['NodeConfig'] = None):
        super().__init__(message, cause)
        self.index = index
        self.size = size
        self.config = config


class ServerRunError(HarnessError):
    """The server process could not be launched or never became ready"""


class ServerCloseError(HarnessError):
    """The server process could not be stopped or its state removed"""


class CloseError(HarnessError):
    """One or more nodes of a cluster failed to close"""

    def __init__(self, message: str, failures: List[Tuple[int, BaseException]]):
        super().__init__(message, failures[0][1] if failures else None)
        self.failures = failures

    def __str__(self) -> str:
        details = "; ".join(f"node {index + 1}: {error}" for index, error in self.failures)
        return f"{self.message}: {details}"
