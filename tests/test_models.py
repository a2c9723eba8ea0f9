"""
Tests for core data models
"""
import pytest
from cluster_harness.models import (
    HarnessConfig, NodeConfig, ClusterSettings, NodeState, GOSSIP_CLUSTER_TYPE
)


def test_harness_config_defaults():
    """Test harness configuration defaults"""
    config = HarnessConfig()
    assert config.host == "localhost"
    assert config.cluster_type == GOSSIP_CLUSTER_TYPE == "gossip"
    assert config.server_binary == "pilosa"
    assert config.startup_timeout == 30.0
    assert config.temp_dir is None
    assert config.enable_cleanup == True


def test_cluster_settings_default_hosts_not_shared():
    first = ClusterSettings()
    second = ClusterSettings()
    first.hosts.append("localhost:10101")

    assert second.hosts == []


def test_node_config_addresses():
    """Test derived host, port and gossip address"""
    config = NodeConfig(
        bind="localhost:10101",
        gossip_port="14000",
        gossip_seed="localhost:14000",
        data_dir="/tmp/pilosa-abc"
    )

    assert config.host == "localhost"
    assert config.port == 10101
    assert config.gossip_address == "localhost:14000"
    assert config.cluster.type == "gossip"


def test_node_config_to_dict():
    config = NodeConfig("localhost:1", "2", "localhost:3", "/tmp/d", ClusterSettings(hosts=["localhost:1"]))

    assert config.to_dict() == {
        'bind': "localhost:1",
        'gossip_port': "2",
        'gossip_seed': "localhost:3",
        'data_dir': "/tmp/d",
        'cluster': {'type': "gossip", 'hosts': ["localhost:1"]},
    }


def test_node_states():
    assert [state.value for state in NodeState] == [
        "created", "configured", "starting", "running", "failed", "closed"
    ]
