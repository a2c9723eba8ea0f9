"""
Index Cluster Harness - Ephemeral multi-node index server clusters for integration tests
"""
from .models import HarnessConfig, NodeConfig, ClusterSettings, NodeState, GOSSIP_CLUSTER_TYPE
from .errors import (
    HarnessError, AllocationError, ConfigError, StartError,
    ServerRunError, ServerCloseError, CloseError
)
from .cluster_orchestrator import (
    PortAllocator, find_free_port, NodeConfigFactory, Node, Cluster,
    ClusterOrchestrator, new_server, new_running_server, new_server_cluster
)
from .config import load_harness_config

__all__ = [
    'HarnessConfig',
    'NodeConfig',
    'ClusterSettings',
    'NodeState',
    'GOSSIP_CLUSTER_TYPE',
    'HarnessError',
    'AllocationError',
    'ConfigError',
    'StartError',
    'ServerRunError',
    'ServerCloseError',
    'CloseError',
    'PortAllocator',
    'find_free_port',
    'NodeConfigFactory',
    'Node',
    'Cluster',
    'ClusterOrchestrator',
    'new_server',
    'new_running_server',
    'new_server_cluster',
    'load_harness_config',
]
