"""Tests for the topology model and the built-in network."""

import pytest

from routing_sim.core.enums import NodeKind
from routing_sim.core.link import Link
from routing_sim.core.node import Node
from routing_sim.core.topology import Topology
from routing_sim.topologies import two_subnet_network


def test_two_subnet_network_shape():
    """Test the node and link counts of the teaching network"""
    topology = two_subnet_network()

    assert len(topology.nodes) == 9
    assert len(topology.links) == 10
    assert topology.node("router1").kind is NodeKind.ROUTER
    assert [node.id for node in topology.hosts(is_destination=True)] == ["host4"]
    assert [node.id for node in topology.hosts(is_destination=False)] == ["host1", "host2", "host3"]


def test_lookups():
    """Test node lookup by id and address and link lookup in both directions"""
    topology = two_subnet_network()

    assert topology.node_by_address("10.0.2.1").id == "router2"
    assert topology.node("missing") is None
    assert topology.node_by_address("1.2.3.4") is None

    link = topology.link_between("router1", "router2")
    assert link is topology.link_between("router2", "router1")
    assert link.latency == 10
    assert topology.link_between("host1", "host4") is None
    assert topology.link_between("host1", "missing") is None
    assert sorted(topology.neighbours("switch2")) == ["host3", "host4", "router2", "router3"]


def test_routes_are_consistent_with_links():
    """Test that every gateway in the built-in tables is an adjacent node"""
    assert two_subnet_network().inconsistent_routes() == []


def test_inconsistent_route_is_reported():
    """Test that a gateway without a link is listed"""
    topology = two_subnet_network()
    entry = topology.node("router1").routing_table.add("172.16.0.0", "255.255.0.0", "192.168.2.1")

    assert topology.inconsistent_routes() == [("router1", entry)]


def test_factory_builds_fresh_state():
    """Test that each call returns independent links"""
    first = two_subnet_network()
    first.links[0].utilization = 60.0

    assert two_subnet_network().links[0].utilization == 0.0


def test_invalid_topologies():
    """Test that configuration errors raise ValueError"""
    a = Node("a", "10.0.0.1", NodeKind.HOST)
    b = Node("b", "10.0.0.2", NodeKind.HOST)

    with pytest.raises(ValueError):
        Topology([a, Node("a", "10.0.0.3", NodeKind.HOST)], [])
    with pytest.raises(ValueError):
        Topology([a, Node("c", "10.0.0.1", NodeKind.HOST)], [])
    with pytest.raises(ValueError):
        Topology([a], [Link("a", "b", latency=1)])
    with pytest.raises(ValueError):
        Topology([a, b], [Link("a", "b", latency=1), Link("b", "a", latency=2)])
    with pytest.raises(ValueError):
        Link("a", "a", latency=1)
    with pytest.raises(ValueError):
        Link("a", "b", latency=0)
    with pytest.raises(ValueError):
        Node("d", "10.0.0.300", NodeKind.ROUTER)


def test_link_utilization_clamping():
    """Test that link load saturates at the default and at a custom ceiling"""
    link = Link("a", "b", latency=2)

    for _ in range(7):
        link.add_load(20)
    assert link.utilization == 100

    link.utilization = 0.0
    for _ in range(3):
        link.add_load(20, ceiling=50)
    assert link.utilization == 50
