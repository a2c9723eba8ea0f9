"""
Builds startup configuration for individual index server nodes
"""
import logging
import tempfile
from typing import Optional
from ..errors import AllocationError, ConfigError
from ..interfaces import INodeConfigFactory
from ..models import HarnessConfig, NodeConfig, ClusterSettings
from .port_allocator import PortAllocator

logger = logging.getLogger(__name__)


class NodeConfigFactory(INodeConfigFactory):
    """Allocates ports and a data directory for one node at a time"""

    def __init__(self, harness_config: Optional[HarnessConfig] = None,
                 port_allocator: Optional[PortAllocator] = None):
        self.harness_config = harness_config or HarnessConfig()
        self.port_allocator = port_allocator or PortAllocator()

    def new_node_config(self) -> NodeConfig:
        """
        Build a self-seeded node configuration.

        The client port is released before the gossip port is requested, so
        the two never collide. The orchestrator overrides the gossip seed of
        every node but the first.
        """
        host = self.harness_config.host

        try:
            port = self.port_allocator.find_free_port()
        except AllocationError as e:
            raise ConfigError("getting port", e) from e

        try:
            gossip_port = self.port_allocator.find_free_port()
        except AllocationError as e:
            raise ConfigError("getting gossip port", e) from e

        try:
            data_dir = tempfile.mkdtemp(
                prefix=self.harness_config.data_dir_prefix,
                dir=self.harness_config.temp_dir
            )
        except OSError as e:
            raise ConfigError("temp dir", e) from e

        config = NodeConfig(
            bind=f"{host}:{port}",
            gossip_port=str(gossip_port),
            gossip_seed=f"{host}:{gossip_port}",
            data_dir=data_dir,
            cluster=ClusterSettings(type=self.harness_config.cluster_type)
        )
        logger.info(f"Configured node: bind {config.bind}, gossip port {config.gossip_port}, data dir {data_dir}")
        return config
