"""
TCP helpers for probing node listeners
"""
import socket
import logging
from contextlib import contextmanager

logger = logging.getLogger(__name__)


@contextmanager
def tcp_connection(host: str, port: int, timeout: float):
    conn = None
    try:
        conn = socket.create_connection((host, port), timeout=timeout)
        yield conn
    finally:
        if conn is not None:
            try:
                conn.close()
            except OSError:
                pass  # Ignore errors during cleanup


def is_port_open(host: str, port: int, timeout: float = 1.0) -> bool:
    try:
        with tcp_connection(host, port, timeout):
            return True
    except OSError as e:
        logger.debug(f"{host}:{port} not accepting connections: {e}")
        return False
