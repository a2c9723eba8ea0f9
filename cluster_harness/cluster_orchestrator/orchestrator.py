import os
import shutil
import logging
from typing import Callable, Iterator, List, Optional
from ..errors import ConfigError, StartError, CloseError
from ..interfaces import IClusterOrchestrator, INodeConfigFactory, IServerRuntime
from ..models import HarnessConfig, NodeConfig, NodeState
from ..server.command import ServerCommand
from .node_config import NodeConfigFactory

logging.basicConfig(format='%(levelname)-5s | %(filename)s:%(lineno)-3d | %(message)s', level=logging.INFO, force=True)
logger = logging.getLogger(__name__)

RuntimeFactory = Callable[[NodeConfig], IServerRuntime]


class Node:
    """Lifecycle handle for one server runtime and the configuration it owns"""

    def __init__(self, config: Optional[NodeConfig], runtime_factory: RuntimeFactory):
        self.config = config
        self.runtime_factory = runtime_factory
        self.runtime: Optional[IServerRuntime] = None
        self.state = NodeState.CREATED
        if config is not None:
            self.configure(config)

    def configure(self, config: NodeConfig) -> None:
        if self.state not in (NodeState.CREATED, NodeState.CONFIGURED):
            raise RuntimeError(f"cannot configure node in state {self.state.value}")
        self.config = config
        self.state = NodeState.CONFIGURED

    def run(self) -> None:
        """Start the node; the runtime sees the configuration as it is now"""
        if self.state is not NodeState.CONFIGURED:
            raise RuntimeError(f"cannot start node in state {self.state.value}")

        self.state = NodeState.STARTING
        try:
            self.runtime = self.runtime_factory(self.config)
            self.runtime.run()
        except Exception:
            self.state = NodeState.FAILED
            raise
        self.state = NodeState.RUNNING

    def close(self) -> None:
        """
        Stop the node.

        A running node becomes CLOSED. A FAILED node has its runtime closed to
        release whatever the failed start left behind but stays FAILED. A node
        that never started has nothing to release.
        """
        if self.state not in (NodeState.RUNNING, NodeState.FAILED) or self.runtime is None:
            return

        try:
            self.runtime.close()
        finally:
            if self.state is NodeState.RUNNING:
                self.state = NodeState.CLOSED

    def __repr__(self) -> str:
        bind = self.config.bind if self.config else None
        return f"Node(bind={bind!r}, state={self.state.value})"


class Cluster:
    """Ordered, fixed-size collection of running nodes"""

    def __init__(self, nodes: List[Node]):
        self._nodes = tuple(nodes)

    @property
    def nodes(self) -> List[Node]:
        return list(self._nodes)

    @property
    def configs(self) -> List[NodeConfig]:
        return [node.config for node in self._nodes]

    @property
    def hosts(self) -> List[str]:
        return [node.config.bind for node in self._nodes]

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def __getitem__(self, index: int) -> Node:
        return self._nodes[index]

    def close(self) -> None:
        """Close every node in order; raise CloseError if any close failed"""
        failures = []
        for i, node in enumerate(self._nodes):
            try:
                node.close()
            except Exception as e:
                logger.error(f"Failed to close node {i + 1} on {node.config.bind}: {e}")
                failures.append((i, e))

        if failures:
            raise CloseError(f"closing {len(failures)} of {len(self._nodes)} nodes", failures)
        logger.info(f"Cluster of {len(self._nodes)} nodes closed")

    def __enter__(self) -> 'Cluster':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class ClusterOrchestrator(IClusterOrchestrator):
    """
    Builds gossip clusters of index server nodes for tests.

    Node 0 is the gossip seed every other node joins through, so nodes are
    started strictly in order and node 0 must be up before node 1 starts.
    """

    def __init__(self, harness_config: Optional[HarnessConfig] = None,
                 config_factory: Optional[INodeConfigFactory] = None,
                 runtime_factory: Optional[RuntimeFactory] = None):
        self.harness_config = harness_config or HarnessConfig()
        self.config_factory = config_factory or NodeConfigFactory(self.harness_config)
        self.runtime_factory = runtime_factory or self._default_runtime

    def _default_runtime(self, config: NodeConfig) -> IServerRuntime:
        return ServerCommand(config, harness_config=self.harness_config)

    def new_server(self) -> Node:
        """Build one configured, not yet started, self-seeded node"""
        try:
            config = self.config_factory.new_node_config()
        except ConfigError as e:
            raise ConfigError("new server", e) from e
        return Node(config, self.runtime_factory)

    def build_configs(self, size: int) -> List[NodeConfig]:
        """Build `size` configurations wired to node 0's gossip seed and sharing one host list"""
        configs: List[NodeConfig] = []
        hosts: List[str] = []

        for i in range(size):
            try:
                config = self.config_factory.new_node_config()
            except ConfigError as e:
                self._discard_data_dirs(configs)
                raise ConfigError("new server", e) from e
            configs.append(config)
            hosts.append(config.bind)

        if configs:
            seed = configs[0].gossip_seed
            for config in configs[1:]:
                config.gossip_seed = seed

        for config in configs:
            config.cluster.hosts = list(hosts)

        return configs

    def new_cluster(self, size: int) -> Cluster:
        """Configure and start `size` nodes in order, rolling back on the first failure"""
        if size < 0:
            raise ValueError(f"cluster size must be non-negative, got {size}")

        logger.info(f"Creating cluster of {size} nodes")
        nodes = [Node(config, self.runtime_factory) for config in self.build_configs(size)]

        for i, node in enumerate(nodes):
            logger.info(f"Starting node {i + 1}/{size} on {node.config.bind} (gossip seed {node.config.gossip_seed})")
            try:
                node.run()
            except Exception as e:
                logger.error(f"Node {i + 1}/{size} on {node.config.bind} failed to start: {e}")
                self.best_effort_rollback(nodes[:i + 1])
                self._discard_data_dirs([n.config for n in nodes[i:] if n.runtime is None])
                raise StartError(
                    f"starting server {i + 1} of {size}. Config: {node.config!r}",
                    e, index=i, size=size, config=node.config
                ) from e

        logger.info(f"All {size} nodes are running")
        return Cluster(nodes)

    def best_effort_rollback(self, nodes: List[Node]) -> None:
        """
        Close each node in order, attempting every close.

        Close failures are logged and never raised, so the start failure that
        triggered the rollback is the error the caller sees.
        """
        for node in nodes:
            try:
                node.close()
            except Exception as e:
                logger.warning(f"Ignoring close failure for {node.config.bind} during rollback: {e}")

    def _discard_data_dirs(self, configs: List[NodeConfig]) -> None:
        if not self.harness_config.enable_cleanup:
            return
        for config in configs:
            if os.path.isdir(config.data_dir):
                shutil.rmtree(config.data_dir, ignore_errors=True)


def new_server(harness_config: Optional[HarnessConfig] = None) -> Node:
    return ClusterOrchestrator(harness_config).new_server()


def new_running_server(harness_config: Optional[HarnessConfig] = None) -> Node:
    return new_server_cluster(1, harness_config)[0]


def new_server_cluster(size: int, harness_config: Optional[HarnessConfig] = None) -> Cluster:
    return ClusterOrchestrator(harness_config).new_cluster(size)
