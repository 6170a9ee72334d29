"""Built-in topologies for routing simulation.

The two-subnet network joins 192.168.1.0/24 and 192.168.2.0/24 through a
triangle of core routers on 10.0.0.0/8:

    host1 -+                    +- router2 -+              +- host3
           +- switch1 - router1 |     |     +- switch2 ----+
    host2 -+                    +- router3 -+              +- host4
"""

from typing import List, Tuple

from routing_sim.core.enums import NodeKind
from routing_sim.core.link import Link
from routing_sim.core.node import Node
from routing_sim.core.routing_table import DIRECT, RoutingTable
from routing_sim.core.topology import Topology

MASK_8 = "255.0.0.0"
MASK_24 = "255.255.255.0"


def two_subnet_tables() -> dict:
    """Static routing tables of the two-subnet network, keyed by node ID."""
    tables = {node_id: RoutingTable() for node_id in (
        "host1", "host2", "switch1", "router1", "router2", "router3", "switch2", "host3", "host4"
    )}

    tables["host1"].add_default("192.168.1.1")
    tables["host2"].add_default("192.168.1.1")

    tables["switch1"].add("192.168.1.0", MASK_24, DIRECT, "local", 0)
    tables["switch1"].add_default("10.0.1.1", "uplink")

    tables["router1"].add("192.168.1.0", MASK_24, "192.168.1.1", "eth0", 1)
    tables["router1"].add("192.168.2.0", MASK_24, "10.0.2.1", "eth1", 10)
    tables["router1"].add("10.0.0.0", MASK_8, DIRECT, "eth2", 0)

    tables["router2"].add("192.168.2.0", MASK_24, "192.168.2.1", "eth0", 1)
    tables["router2"].add("192.168.1.0", MASK_24, "10.0.1.1", "eth1", 10)
    tables["router2"].add("10.0.0.0", MASK_8, DIRECT, "eth2", 0)

    tables["router3"].add("192.168.2.0", MASK_24, "192.168.2.1", "eth0", 1)
    tables["router3"].add("192.168.1.0", MASK_24, "10.0.1.1", "eth1", 15)
    tables["router3"].add("10.0.0.0", MASK_8, DIRECT, "eth2", 0)

    tables["switch2"].add("192.168.2.0", MASK_24, DIRECT, "local", 0)
    tables["switch2"].add_default("10.0.2.1", "uplink")

    tables["host3"].add_default("192.168.2.1")
    tables["host4"].add_default("192.168.2.1")
    return tables


def two_subnet_network() -> Topology:
    """Build the nine-node teaching network.

    Returns:
        A fresh Topology with zero link utilization.
    """
    tables = two_subnet_tables()
    host, switch, router = NodeKind.HOST, NodeKind.SWITCH, NodeKind.ROUTER
    lan1, lan2, core = "192.168.1.0/24", "192.168.2.0/24", "10.0.0.0/8"

    node_rows: List[Tuple[str, str, NodeKind, str, Tuple[float, float]]] = [
        ("host1", "192.168.1.10", host, lan1, (50, 150)),
        ("host2", "192.168.1.20", host, lan1, (50, 250)),
        ("switch1", "192.168.1.1", switch, lan1, (150, 200)),
        ("router1", "10.0.1.1", router, core, (300, 200)),
        ("router2", "10.0.2.1", router, core, (500, 150)),
        ("router3", "10.0.3.1", router, core, (500, 250)),
        ("switch2", "192.168.2.1", switch, lan2, (650, 200)),
        ("host3", "192.168.2.10", host, lan2, (750, 150)),
        ("host4", "192.168.2.20", host, lan2, (750, 250)),
    ]
    nodes = [
        Node(
            node_id,
            address,
            kind,
            subnet,
            is_destination=node_id == "host4",
            routing_table=tables[node_id],
            position=position,
        )
        for node_id, address, kind, subnet, position in node_rows
    ]

    links = [
        Link("host1", "switch1", latency=1, bandwidth=100),
        Link("host2", "switch1", latency=1, bandwidth=100),
        Link("switch1", "router1", latency=2, bandwidth=1000),
        Link("router1", "router2", latency=10, bandwidth=1000),
        Link("router1", "router3", latency=15, bandwidth=1000),
        Link("router2", "router3", latency=8, bandwidth=1000),
        Link("router2", "switch2", latency=2, bandwidth=1000),
        Link("router3", "switch2", latency=2, bandwidth=1000),
        Link("switch2", "host3", latency=1, bandwidth=100),
        Link("switch2", "host4", latency=1, bandwidth=100),
    ]
    return Topology(nodes, links)
