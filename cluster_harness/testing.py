"""
pytest helpers for tests that need running index servers.

The ``must_*`` helpers fail the current test with the full error chain instead
of raising. The module is also a pytest plugin, registered through the
``pytest11`` entry point, so installing the package makes the ``server_cluster``
fixture available everywhere; clusters it builds are closed at teardown. Without
the installed entry point, add ``pytest_plugins = ["cluster_harness.testing"]``
to the top-level ``conftest.py``.
"""
import logging
import pytest
from typing import Callable, List, Optional
from .errors import HarnessError
from .models import HarnessConfig
from .cluster_orchestrator import (
    Cluster, ClusterOrchestrator, Node, find_free_port, new_running_server
)

logger = logging.getLogger(__name__)


def must_find_port() -> int:
    try:
        return find_free_port()
    except HarnessError as e:
        pytest.fail(f"allocating new port: {e}")


def must_new_running_server(harness_config: Optional[HarnessConfig] = None) -> Node:
    try:
        return new_running_server(harness_config)
    except HarnessError as e:
        pytest.fail(f"running new server: {e}")


def must_new_server_cluster(size: int, harness_config: Optional[HarnessConfig] = None,
                            orchestrator: Optional[ClusterOrchestrator] = None) -> Cluster:
    orchestrator = orchestrator or ClusterOrchestrator(harness_config)
    try:
        return orchestrator.new_cluster(size)
    except HarnessError as e:
        pytest.fail(f"new cluster: {e}")


@pytest.fixture
def harness_config() -> HarnessConfig:
    """Harness settings used by `server_cluster`; override to customise"""
    return HarnessConfig()


@pytest.fixture
def cluster_orchestrator(harness_config) -> ClusterOrchestrator:
    """Orchestrator used by `server_cluster`; override to inject a runtime factory"""
    return ClusterOrchestrator(harness_config)


@pytest.fixture
def server_cluster(cluster_orchestrator) -> Callable[[int], Cluster]:
    """Factory building clusters that are closed when the test finishes"""
    clusters: List[Cluster] = []

    def factory(size: int) -> Cluster:
        cluster = must_new_server_cluster(size, orchestrator=cluster_orchestrator)
        clusters.append(cluster)
        return cluster

    yield factory

    for cluster in clusters:
        try:
            cluster.close()
        except HarnessError as e:
            logger.warning(f"Cluster teardown failed: {e}")
