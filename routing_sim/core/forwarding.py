"""Packet forwarding engine for routing simulation.

This module defines the ForwardingEngine, a per-packet state machine:

    AT_NODE -> IN_TRANSIT -> AT_NODE -> ... -> DELIVERED | DROPPED

A packet at a node is delivered if the node holds the destination address,
otherwise the node's routing table picks the next hop. A packet in transit
advances along its link at a speed inversely proportional to the link
latency and, on reaching the far end, spends one unit of TTL.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from routing_sim.core.enums import DropReason, PacketState
from routing_sim.core.link import Link
from routing_sim.core.packet import DROP, Packet
from routing_sim.core.topology import Topology

DEFAULT_SPEED = 50.0

logger = logging.getLogger(__name__)


@dataclass
class ForwardingEvent:
    """Outcome of a forwarding step for one packet.

    Attributes:
        kind: "hop", "delivered" or "dropped".
        packet: The packet concerned.
        node: Node ID where the event happened.
        previous_node: Node the packet came from, for hops.
        reason: Drop reason, for drops.
    """

    kind: str
    packet: Packet
    node: str
    previous_node: Optional[str] = None
    reason: Optional[DropReason] = None


class ForwardingEngine:
    """Moves packets hop-by-hop through a topology.

    Each packet is processed independently. The engine holds no per-tick
    scratch state, so the result for one packet never depends on the order
    packets are processed in.

    Attributes:
        topology: Topology the packets travel through.
        speed: Progress scale, progress += dt * speed / latency.
    """

    def __init__(self, topology: Topology, speed: float = DEFAULT_SPEED) -> None:
        if speed <= 0:
            raise ValueError(f"Speed must be positive, got {speed}")
        self.topology = topology
        self.speed = speed

    def route(self, packet: Packet) -> Optional[ForwardingEvent]:
        """Make the routing decision for a packet sitting at a node.

        Args:
            packet: A packet in the AT_NODE state.

        Returns:
            A delivered or dropped event if the packet left the network,
            None if it is now in transit.
        """
        node = self.topology.node(packet.current_node)
        if node is None:
            return self._drop(packet, DropReason.LINK_MISSING)

        if node.address == packet.dest_address:
            packet.state = PacketState.DELIVERED
            packet.next_hop_node = None
            logger.debug("packet %s delivered at %s after %d hops", packet.id, node.id, packet.get_hop_count())
            return ForwardingEvent("delivered", packet, node.id)

        next_hop_address = node.routing_table.resolve_next_hop(packet.dest_address)
        if next_hop_address is None:
            packet.next_hop_address = DROP
            return self._drop(packet, DropReason.NO_ROUTE)

        packet.next_hop_address = next_hop_address
        next_node = self.topology.node_by_address(next_hop_address)
        if next_node is None or self.topology.link_between(node.id, next_node.id) is None:
            return self._drop(packet, DropReason.LINK_MISSING)

        packet.next_hop_node = next_node.id
        packet.progress = 0.0
        packet.state = PacketState.IN_TRANSIT
        return None

    def advance(self, packet: Packet, dt: float) -> List[ForwardingEvent]:
        """Move a packet in transit along its link.

        When the far end is reached the hop is recorded, TTL is spent and
        the packet is routed again at the new node within the same call. The
        new hop starts at zero progress.

        Args:
            packet: A packet in the IN_TRANSIT state.
            dt: Elapsed simulation time.

        Returns:
            Events produced: a hop, possibly followed by a delivery or drop.
        """
        link = self.current_link(packet)
        if link is None:
            return [self._drop(packet, DropReason.LINK_MISSING)]

        packet.progress += dt * self.speed / link.latency
        if packet.progress < 1:
            return []

        previous = packet.current_node
        packet.ttl -= 1
        packet.record_hop(packet.next_hop_node)
        packet.state = PacketState.AT_NODE
        events = [ForwardingEvent("hop", packet, packet.current_node, previous_node=previous)]

        if packet.ttl <= 0:
            events.append(self._drop(packet, DropReason.TTL_EXHAUSTED))
            return events

        outcome = self.route(packet)
        if outcome is not None:
            events.append(outcome)
        return events

    def step(self, packets: Iterable[Packet], dt: float) -> List[ForwardingEvent]:
        """Advance every active packet by one tick.

        Packets at a node are routed and then advanced in the same tick.

        Args:
            packets: Active packets.
            dt: Elapsed simulation time.

        Returns:
            All events produced during the tick.
        """
        events: List[ForwardingEvent] = []
        for packet in packets:
            if packet.state is PacketState.AT_NODE:
                outcome = self.route(packet)
                if outcome is not None:
                    events.append(outcome)
                    continue
            if packet.state is PacketState.IN_TRANSIT:
                events.extend(self.advance(packet, dt))
        return events

    def current_link(self, packet: Packet) -> Optional[Link]:
        """Get the link a packet in transit occupies.

        Args:
            packet: The packet.

        Returns:
            The Link, or None if the packet is not on a link.
        """
        if packet.state is not PacketState.IN_TRANSIT or packet.next_hop_node is None:
            return None
        return self.topology.link_between(packet.current_node, packet.next_hop_node)

    def _drop(self, packet: Packet, reason: DropReason) -> ForwardingEvent:
        packet.state = PacketState.DROPPED
        packet.drop_reason = reason
        logger.debug(
            "drop packet %s at %s (%s), next hop %s",
            packet.id,
            packet.current_node,
            reason.value,
            packet.next_hop_address or "-",
        )
        return ForwardingEvent("dropped", packet, packet.current_node, reason=reason)
