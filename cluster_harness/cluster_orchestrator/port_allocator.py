"""
Free TCP port discovery for test nodes.

Ports are found by letting the OS pick one for a throwaway listener and then
releasing it. Another process may grab the port before the node binds it, so
this is only suitable for isolated test environments.
"""
import socket
import logging
from ..errors import AllocationError

logger = logging.getLogger(__name__)


class PortAllocator:
    """Finds momentarily-free TCP ports on the wildcard address"""

    def __init__(self, family: int = socket.AF_INET):
        self.family = family

    def find_free_port(self) -> int:
        """Return a port the OS just assigned to (and released from) a temporary listener"""
        try:
            family, socktype, proto, _, sockaddr = socket.getaddrinfo(
                None, 0, self.family, socket.SOCK_STREAM, 0, socket.AI_PASSIVE
            )[0]
        except (socket.gaierror, IndexError) as e:
            raise AllocationError("resolving new port addr", e) from e

        try:
            listener = socket.socket(family, socktype, proto)
        except OSError as e:
            raise AllocationError("listening to get new port", e) from e

        try:
            listener.bind(sockaddr)
            listener.listen(1)
            port = listener.getsockname()[1]
        except OSError as e:
            listener.close()
            raise AllocationError("listening to get new port", e) from e

        try:
            listener.close()
        except OSError as e:
            raise AllocationError("closing listener", e, port=port) from e

        logger.debug(f"Found free port {port}")
        return port


def find_free_port() -> int:
    """Find a free port using the default IPv4 allocator"""
    return PortAllocator().find_free_port()
