"""
Base interfaces and abstract classes for all major components
"""
from abc import ABC, abstractmethod
from .models import NodeConfig


class IServerRuntime(ABC):
    """Interface for one index server instance driven by the harness"""

    @abstractmethod
    def run(self) -> None:
        """Start the server and block until it is ready; raise on failure"""
        pass

    @abstractmethod
    def close(self) -> None:
        """Stop the server and release its ports and temporary state"""
        pass


class INodeConfigFactory(ABC):
    """Interface for building a single node's startup configuration"""

    @abstractmethod
    def new_node_config(self) -> NodeConfig:
        """Build a fresh, self-seeded node configuration"""
        pass


class IClusterOrchestrator(ABC):
    """Interface for cluster bootstrap and rollback"""

    @abstractmethod
    def new_cluster(self, size: int):
        """Configure and start `size` nodes, or roll back and raise"""
        pass
