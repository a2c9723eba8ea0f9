"""
Server runtime - Launches and stops index server processes
"""
from .command import ServerCommand

__all__ = ['ServerCommand']
