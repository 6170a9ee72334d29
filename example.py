#!/usr/bin/env python3
"""Example routing simulation using the routing_sim package.

This script walks a single packet across the two-subnet network, then
breaks a routing table to show how drops are reported.
"""

from pprint import pprint

from routing_sim.core.enums import DropReason
from routing_sim.core.simulator import RoutingSimulation
from routing_sim.topologies import two_subnet_network
from routing_sim.utils.metrics import format_routing_table

# A rate this low never fires during the walkthrough.
QUIET = {"packetGenRate": 1e-9}


def trace_single_packet() -> None:
    """Send one packet from host1 to host4 and print every hop."""
    sim = RoutingSimulation()
    sim.init()
    sim.register_hook(
        "packet_hop",
        lambda packet, previous, node, time: print(f"t={time:.2f}s packet {packet.id}: {previous} -> {node} (ttl {packet.ttl})"),
    )
    sim.register_hook(
        "packet_arrived",
        lambda packet, node, time: print(f"t={time:.2f}s packet {packet.id} delivered at {node}: {' -> '.join(packet.path)}"),
    )

    print("Routing table of router1:")
    print(format_routing_table(sim.topology.node("router1").routing_table))
    print()

    sim.send_packet("host1", "192.168.2.20")
    while sim.packets:
        sim.update(1 / 60, QUIET)


def broken_table() -> None:
    """Empty router1's table so every packet is dropped there."""

    def topology_without_router1_routes():
        topology = two_subnet_network()
        topology.node("router1").routing_table.clear()
        return topology

    sim = RoutingSimulation(topology_factory=topology_without_router1_routes)
    sim.init()
    sim.register_hook(
        "packet_dropped",
        lambda packet, node, reason, time: print(f"packet {packet.id} dropped at {node}: {reason.value}"),
    )
    metrics = sim.run(5.0)
    pprint(metrics["drops_by_reason"])
    print(f"{sim.drop_counts[DropReason.NO_ROUTE]} of {metrics['packets_generated']} packets had no route")


if __name__ == "__main__":
    print("=== Tracing a single packet ===")
    trace_single_packet()
    print("\n=== Router without routes ===")
    broken_table()
