"""
Cluster Orchestrator - Port allocation, node configuration and cluster bootstrap/rollback
"""
from .port_allocator import PortAllocator, find_free_port
from .node_config import NodeConfigFactory
from .orchestrator import (
    Node,
    Cluster,
    ClusterOrchestrator,
    new_server,
    new_running_server,
    new_server_cluster
)

__all__ = [
    'PortAllocator',
    'find_free_port',
    'NodeConfigFactory',
    'Node',
    'Cluster',
    'ClusterOrchestrator',
    'new_server',
    'new_running_server',
    'new_server_cluster',
]
