"""Node class for routing simulation.

This module defines the Node class, which represents a network node
(host, switch, router) in the simulated network. The kind is carried as
data; all nodes forward identically through their routing tables.
"""

from typing import Optional, Tuple

from routing_sim.core.enums import NodeKind
from routing_sim.core.routing_table import RoutingTable, address_to_int


class Node:
    """Represents a network node (host, switch, router).

    Attributes:
        id: Unique identifier for the node.
        address: Dotted-quad network address.
        kind: Host, switch or router.
        subnet: CIDR subnet the node belongs to, bookkeeping only.
        is_destination: Whether generated packets may target this host.
        routing_table: Ordered static routing table.
        position: Optional (x, y) drawing position.
    """

    def __init__(
        self,
        node_id: str,
        address: str,
        kind: NodeKind,
        subnet: str = "",
        is_destination: bool = False,
        routing_table: Optional[RoutingTable] = None,
        position: Optional[Tuple[float, float]] = None,
    ) -> None:
        """Initialize a network node.

        Args:
            node_id: Unique identifier for the node.
            address: Dotted-quad network address.
            kind: Host, switch or router.
            subnet: CIDR subnet, e.g. "192.168.1.0/24".
            is_destination: Whether generated packets may target this host.
            routing_table: Static routing table (default: empty).
            position: Optional drawing position.
        """
        address_to_int(address)
        self.id = node_id
        self.address = address
        self.kind = kind
        self.subnet = subnet
        self.is_destination = is_destination
        self.routing_table = routing_table if routing_table is not None else RoutingTable()
        self.position = position

    @property
    def is_host(self) -> bool:
        return self.kind is NodeKind.HOST

    def __repr__(self) -> str:
        """Return string representation of the node.

        Returns:
            String representation of the node.
        """
        return f"Node({self.id}, {self.address}, {self.kind.value})"
