"""
Shared fixtures: in-process server runtimes that bind real ports
"""
import socket
import pytest
from typing import List, Optional, Set
from cluster_harness.interfaces import IServerRuntime
from cluster_harness.models import HarnessConfig, NodeConfig
from cluster_harness.cluster_orchestrator import ClusterOrchestrator

pytest_plugins = ["pytester", "cluster_harness.testing"]


def bind_listener(port: int) -> socket.socket:
    """Listen on the wildcard address, failing if the port is taken"""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.bind(('', port))
        sock.listen(1)
    except OSError:
        sock.close()
        raise
    return sock


class ListenerRuntime(IServerRuntime):
    """Stand-in server that only holds a listener on the node's bind port"""

    def __init__(self, config: NodeConfig, events: Optional[List] = None):
        self.config = config
        self.events = events if events is not None else []
        self.listener: Optional[socket.socket] = None

    def run(self) -> None:
        self.events.append(('run', self.config.bind))
        self.listener = bind_listener(self.config.port)

    def close(self) -> None:
        self.events.append(('close', self.config.bind))
        if self.listener is not None:
            self.listener.close()
            self.listener = None


class ScriptedRuntimeFactory:
    """
    Builds ListenerRuntimes and injects failures by start order.

    `fail_run` holds start positions whose run raises; `fail_close` holds
    positions whose close raises after releasing the listener.
    """

    def __init__(self, fail_run: Set[int] = frozenset(), fail_close: Set[int] = frozenset()):
        self.fail_run = set(fail_run)
        self.fail_close = set(fail_close)
        self.events: List = []
        self.runtimes: List[ListenerRuntime] = []

    def __call__(self, config: NodeConfig) -> IServerRuntime:
        position = len(self.runtimes)
        runtime = ListenerRuntime(config, self.events)
        factory = self

        if position in self.fail_run:
            def run():
                factory.events.append(('run', config.bind))
                raise OSError(f"simulated start failure on {config.bind}")
            runtime.run = run

        if position in self.fail_close:
            original_close = runtime.close

            def close():
                original_close()
                raise OSError(f"simulated close failure on {config.bind}")
            runtime.close = close

        self.runtimes.append(runtime)
        return runtime


@pytest.fixture
def harness_config(tmp_path) -> HarnessConfig:
    return HarnessConfig(temp_dir=str(tmp_path))


@pytest.fixture
def runtime_factory() -> ScriptedRuntimeFactory:
    return ScriptedRuntimeFactory()


@pytest.fixture
def cluster_orchestrator(harness_config, runtime_factory) -> ClusterOrchestrator:
    return ClusterOrchestrator(harness_config, runtime_factory=runtime_factory)


@pytest.fixture
def scripted_runtimes():
    """Expose the runtime factory class so tests can script failures"""
    return ScriptedRuntimeFactory


@pytest.fixture
def listen_on():
    """Open wildcard listeners for a test and close them afterwards"""
    sockets = []

    def opener(port: int) -> socket.socket:
        sock = bind_listener(port)
        sockets.append(sock)
        return sock

    yield opener

    for sock in sockets:
        sock.close()
