"""
Core data models for the Index Cluster Harness
"""
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Any, Optional
from enum import Enum


GOSSIP_CLUSTER_TYPE = "gossip"


@dataclass
class HarnessConfig:
    """Harness-wide settings shared by every node the harness builds"""
    host: str = "localhost"
    cluster_type: str = GOSSIP_CLUSTER_TYPE
    server_binary: str = "pilosa"
    startup_timeout: float = 30.0
    shutdown_timeout: float = 5.0
    temp_dir: Optional[str] = None
    data_dir_prefix: str = "pilosa-"
    log_dir: Optional[str] = None
    enable_cleanup: bool = True


@dataclass
class ClusterSettings:
    """Membership settings: protocol tag and the full host list"""
    type: str = GOSSIP_CLUSTER_TYPE
    hosts: List[str] = field(default_factory=list)


@dataclass
class NodeConfig:
    """Startup parameters for one index server node"""
    bind: str
    gossip_port: str
    gossip_seed: str
    data_dir: str
    cluster: ClusterSettings = field(default_factory=ClusterSettings)

    @property
    def host(self) -> str:
        return self.bind.rsplit(':', 1)[0]

    @property
    def port(self) -> int:
        return int(self.bind.rsplit(':', 1)[1])

    @property
    def gossip_address(self) -> str:
        """Address other nodes use to join through this node"""
        return f"{self.host}:{self.gossip_port}"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class NodeState(Enum):
    """Lifecycle states of a node handle"""
    CREATED = "created"
    CONFIGURED = "configured"
    STARTING = "starting"
    RUNNING = "running"
    FAILED = "failed"
    CLOSED = "closed"
