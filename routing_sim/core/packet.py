"""Packet class for routing simulation.

This module defines the Packet class, which represents a datagram
travelling hop-by-hop through the simulated network.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from routing_sim.core.enums import DropReason, OsiLayer, PacketState

DEFAULT_TTL = 64
DROP = "drop"


@dataclass
class Packet:
    """Represents a simulated datagram.

    Attributes:
        id: Unique identifier, assigned by the owning simulation.
        source_address: Address of the sending host.
        dest_address: Address of the destination host.
        current_node: Node ID the packet occupies, or departed from while
            in transit.
        ttl: Remaining hop budget.
        next_hop_address: Resolved next hop address, or DROP if unresolved.
        next_hop_node: Node ID of the resolved next hop.
        progress: Fraction of the current link traversed, in [0, 1).
        path: Node IDs visited so far, starting with the source.
        layer: Cosmetic OSI layer tag.
        state: Current forwarding state.
        drop_reason: Why the packet was dropped, if it was.
        payload: Display payload.
        creation_time: Simulation time when the packet was created.
    """

    id: int
    source_address: str
    dest_address: str
    current_node: str
    ttl: int = DEFAULT_TTL
    next_hop_address: str = ""
    next_hop_node: Optional[str] = None
    progress: float = 0.0
    path: List[str] = field(default_factory=list)
    layer: OsiLayer = OsiLayer.TRANSPORT
    state: PacketState = PacketState.AT_NODE
    drop_reason: Optional[DropReason] = None
    payload: str = ""
    creation_time: float = 0.0

    def __post_init__(self):
        """Start the path at the source node."""
        if not self.path:
            self.path.append(self.current_node)

    def record_hop(self, node: str) -> None:
        """Record arrival at a node and forget the previous next hop.

        Args:
            node: Node ID the packet has arrived at.
        """
        self.path.append(node)
        self.current_node = node
        self.progress = 0.0
        self.next_hop_node = None

    def get_hop_count(self) -> int:
        """Get number of completed hops.

        Returns:
            Number of hops taken by the packet.
        """
        return len(self.path) - 1

    @property
    def is_active(self) -> bool:
        return self.state in (PacketState.AT_NODE, PacketState.IN_TRANSIT)
