"""Tests for the simulation owner, generator and utilization tracking."""

from collections import Counter

import numpy as np
import pytest

from routing_sim.core.enums import DropReason, PacketState, RoutingProtocol
from routing_sim.core.params import SimulationParams
from routing_sim.core.simulator import RoutingSimulation
from routing_sim.core.utilization import LinkUtilizationTracker
from routing_sim.topologies import two_subnet_network
from routing_sim.traffic.generators import PacketGenerator

HOST4 = "192.168.2.20"
QUIET = {"packetGenRate": 1e-9}


def create_simulation(**kwargs) -> RoutingSimulation:
    """Create and initialise a simulation"""
    sim = RoutingSimulation(**kwargs)
    sim.init()
    return sim


def test_end_to_end_scenario():
    """Test host1 to host4 through the simulation owner"""
    sim = create_simulation()
    hops = []
    sim.register_hook("packet_hop", lambda packet, previous, node, time: hops.append((previous, node)))
    packet = sim.send_packet("host1", HOST4)

    for _ in range(20):
        sim.update(0.1, QUIET)
        if not sim.packets:
            break

    assert sim.packets_delivered == 1
    assert sim.packets_dropped == 0
    assert list(sim.completed_packets) == [packet]
    assert packet.path == ["host1", "switch1", "router1", "router2", "switch2", "host4"]
    assert packet.ttl == 59
    assert hops[0] == ("host1", "switch1")
    assert len(hops) == 5


def test_generator_only_targets_destination_hosts():
    """Test that generated packets always address a flagged destination host"""
    sim = create_simulation(seed=7)
    generated = []
    sim.register_hook("packet_generated", lambda packet, time: generated.append(packet))

    for _ in range(400):
        sim.update(0.05, {"packetGenRate": 50.0})

    destinations = {node.address for node in sim.topology.hosts(is_destination=True)}
    sources = {node.address for node in sim.topology.hosts(is_destination=False)}
    assert len(generated) > 100
    assert all(p.dest_address in destinations for p in generated)
    assert all(p.source_address in sources for p in generated)
    assert len({p.source_address for p in generated}) == len(sources)
    assert [p.id for p in generated] == list(range(1, len(generated) + 1))


def test_generator_timer():
    """Test that a packet is emitted only once the interval is exceeded"""
    sim = create_simulation()
    counts = []
    for _ in range(10):
        sim.update(0.25, {"packetGenRate": 1.0})
        counts.append(sim.packets_generated)

    assert counts == [0, 0, 0, 0, 1, 1, 1, 1, 1, 2]


def test_generator_emits_at_most_one_packet_per_tick():
    """Test that a long frame still produces a single packet"""
    sim = create_simulation()
    sim.update(10.0, {"packetGenRate": 100.0})

    assert sim.packets_generated == 1


def test_generator_without_eligible_hosts():
    """Test that no packet is produced when no destination host exists"""
    topology = two_subnet_network()
    topology.node("host4").is_destination = False
    generator = PacketGenerator(np.random.default_rng(0))

    packet = generator.maybe_generate(2.0, 1.0, topology, lambda source, dest: pytest.fail("unexpected packet"))

    assert packet is None
    assert generator.timer == 0.0


def test_utilization_bounds_and_snapshot():
    """Test that utilization reflects current occupancy and stays in [0, 100]"""
    sim = create_simulation(seed=3)
    for _ in range(300):
        sim.update(1 / 60, {"packetGenRate": 30.0})

        occupancy = Counter()
        for packet in sim.packets:
            link = sim.engine.current_link(packet)
            if link is not None:
                occupancy[link.endpoints] += 1
        for link in sim.topology.links:
            assert 0 <= link.utilization <= 100
            assert link.utilization == min(100.0, 20.0 * occupancy[link.endpoints])


def test_utilization_clamps_at_maximum():
    """Test that six packets on one link saturate it at 100"""
    sim = create_simulation()
    for _ in range(6):
        sim.send_packet("host1", HOST4)

    sim.update(0.001, QUIET)

    assert all(p.state is PacketState.IN_TRANSIT for p in sim.packets)
    assert sim.topology.link_between("host1", "switch1").utilization == 100
    assert sim.topology.link_between("switch1", "router1").utilization == 0


def test_utilization_is_recomputed_not_accumulated():
    """Test that a link empties once its packets move on"""
    sim = create_simulation()
    sim.send_packet("host1", HOST4)
    sim.update(0.001, QUIET)
    assert sim.topology.link_between("host1", "switch1").utilization == 20

    sim.update(0.1, QUIET)
    assert sim.topology.link_between("host1", "switch1").utilization == 0
    assert sim.topology.link_between("switch1", "router1").utilization == 20


def test_custom_utilization_ceiling():
    """Test that a tracker with a lower ceiling saturates links there"""
    sim = create_simulation()
    sim.tracker = LinkUtilizationTracker(increment=30, ceiling=50)
    sim.send_packet("host1", HOST4)
    sim.send_packet("host1", HOST4)

    snapshot = sim.tracker.update(sim.topology, sim.packets)
    assert snapshot[("host1", "switch1")] == 0

    sim.update(0.001, QUIET)

    assert all(p.state is PacketState.IN_TRANSIT for p in sim.packets)
    assert sim.topology.link_between("host1", "switch1").utilization == 50
    assert sim.utilization_history[-1][1][("host1", "switch1")] == 50


def test_tracker_rejects_bad_increment():
    """Test tracker validation"""
    with pytest.raises(ValueError):
        LinkUtilizationTracker(increment=150)
    with pytest.raises(ValueError):
        LinkUtilizationTracker(increment=30, ceiling=20)
    with pytest.raises(ValueError):
        LinkUtilizationTracker(increment=0, ceiling=0)


def test_no_route_drops_reduce_active_packets():
    """Test that a node with an empty table drops every arriving packet"""

    def broken_topology():
        topology = two_subnet_network()
        topology.node("switch1").routing_table.clear()
        return topology

    sim = create_simulation(topology_factory=broken_topology)
    dropped = []
    sim.register_hook("packet_dropped", lambda packet, node, reason, time: dropped.append((node, reason)))
    for _ in range(3):
        sim.send_packet("host1", HOST4)
    assert len(sim.packets) == 3

    events = sim.update(0.1, QUIET)

    assert sim.packets == []
    assert sim.drop_counts[DropReason.NO_ROUTE] == 3
    assert dropped == [("switch1", DropReason.NO_ROUTE)] * 3
    assert sum(1 for e in events if e.kind == "dropped") == 3
    assert all(p.next_hop_address == "drop" for p, _ in sim.dropped_packets)


def test_lifecycle():
    """Test init, reset and destroy"""
    sim = RoutingSimulation()
    with pytest.raises(RuntimeError):
        sim.update(0.1)

    sim.init()
    for _ in range(120):
        sim.update(0.05)
    assert sim.packets_generated > 0
    assert sim.time > 0

    sim.reset()
    assert sim.packets == []
    assert sim.packets_generated == 0
    assert sim.time == 0.0
    assert all(link.utilization == 0 for link in sim.topology.links)
    assert sum(sim.drop_counts.values()) == 0

    sim.destroy()
    assert sim.topology is None
    assert sim.packets == []
    with pytest.raises(RuntimeError):
        sim.update(0.1)
    with pytest.raises(RuntimeError):
        sim.send_packet("host1", HOST4)


def test_reset_replays_identically():
    """Test that the seeded generator repeats after a reset"""
    sim = create_simulation(seed=11)

    def record():
        pairs = []
        for _ in range(200):
            sim.update(0.05, {"packetGenRate": 10.0})
            pairs.extend((p.source_address, p.id) for p in sim.packets if p.creation_time == sim.time)
        return pairs

    first = record()
    sim.reset()
    second = record()

    assert first
    assert first == second


def test_independent_simulations():
    """Test that two simulations do not share packets or counters"""
    a = create_simulation()
    b = create_simulation()

    first = a.send_packet("host1", HOST4)
    second = b.send_packet("host2", HOST4)

    assert first.id == second.id == 1
    assert a.packets == [first]
    assert b.packets == [second]
    assert a.topology is not b.topology


def test_params():
    """Test parameter bag merging and validation"""
    params = SimulationParams()

    merged = params.merged({"packetGenRate": 5, "routingProtocol": 2, "unknown": True})
    assert merged.packet_gen_rate == 5.0
    assert merged.routing_protocol is RoutingProtocol.OSPF
    assert merged.show_layers is True
    assert params.merged({"routing_protocol": "rip"}).routing_protocol is RoutingProtocol.RIP
    assert params.merged(None) is params

    with pytest.raises(ValueError):
        params.merged({"packetGenRate": 0})
    with pytest.raises(ValueError):
        params.merged({"routingProtocol": 3})


def test_protocol_label_does_not_change_forwarding():
    """Test that RIP and OSPF labels still forward statically"""
    paths = []
    for protocol in (0, 1, 2):
        sim = create_simulation()
        packet = sim.send_packet("host1", HOST4)
        for _ in range(20):
            sim.update(0.1, {"packetGenRate": 1e-9, "routingProtocol": protocol})
        paths.append(packet.path)
        assert sim.params.routing_protocol is RoutingProtocol(protocol)

    assert paths[0] == paths[1] == paths[2]


def test_state_description():
    """Test the narration summary"""
    sim = create_simulation()
    sim.update(0.1, {"routingProtocol": 1, "showLayers": 0})
    description = sim.get_state_description()

    assert "9 nodes and 10 links" in description
    assert "Using RIP protocol" in description
    assert "OSI layer" not in description
    assert "Average network latency: 4.3ms" in description


def test_run_and_metrics():
    """Test a fixed-rate run driven by the frame clock"""
    sim = RoutingSimulation(seed=5)
    metrics = sim.run(20.0, dt=0.05, params={"packetGenRate": 4.0})

    assert metrics["packets_generated"] > 0
    assert metrics["packets_delivered"] > 0
    assert metrics["packets_dropped"] == 0
    assert metrics["packet_loss_rate"] == 0.0
    # host3 is two hops from host4, host1 and host2 are five
    assert 2.0 <= metrics["average_delivered_hops"] <= 5.0
    assert metrics["packets_generated"] == metrics["packets_delivered"] + metrics["active_packets"]
    assert set(metrics["drops_by_reason"]) == {reason.value for reason in DropReason}
    assert ("router1", "router2") in metrics["link_utilization"]
    assert len(sim.utilization_history) > 0
    assert sim.time == pytest.approx(20.0, abs=0.1)


def test_average_hops_counts_packets_beyond_history():
    """Test that the delivered hop average covers packets evicted from history"""
    sim = create_simulation(history_limit=2)

    sim.send_packet("host3", HOST4)
    while sim.packets:
        sim.update(0.1, QUIET)
    sim.send_packet("host1", HOST4)
    sim.send_packet("host1", HOST4)
    while sim.packets:
        sim.update(0.1, QUIET)

    assert sim.packets_delivered == 3
    assert len(sim.completed_packets) == 2
    assert [p.get_hop_count() for p in sim.completed_packets] == [5, 5]
    assert sim.calculate_metrics()["average_delivered_hops"] == 4.0

    sim.reset()
    assert sim.delivered_hops_total == 0
    assert sim.calculate_metrics()["average_delivered_hops"] == 0.0
