"""Routing simulation owner.

This module defines the RoutingSimulation class, which owns the topology,
the active packets, the generator, the forwarding engine and the link
utilization tracker, and exposes the init/update/reset/destroy lifecycle
driven once per animation frame.
"""

import logging
from collections import defaultdict, deque
from typing import Any, Callable, Deque, Dict, List, Mapping, Optional, Tuple

import numpy as np
import simpy

from routing_sim.core.enums import DropReason, PacketState
from routing_sim.core.forwarding import DEFAULT_SPEED, ForwardingEngine, ForwardingEvent
from routing_sim.core.packet import DEFAULT_TTL, Packet
from routing_sim.core.params import SimulationParams
from routing_sim.core.topology import Topology
from routing_sim.core.utilization import LinkUtilizationTracker
from routing_sim.topologies import two_subnet_network
from routing_sim.traffic.generators import PacketGenerator

logger = logging.getLogger(__name__)


class RoutingSimulation:
    """Discrete-time routing simulation.

    Attributes:
        topology: Current topology, None before init and after destroy.
        params: Current runtime parameters.
        packets: Active packets, at a node or in transit.
        completed_packets: Most recently delivered packets.
        dropped_packets: Most recently dropped packets with their reason.
        drop_counts: Number of drops per reason since the last reset.
        packets_generated: Number of packets created since the last reset.
        packets_delivered: Number of packets delivered since the last reset.
        delivered_hops_total: Completed hops summed over all delivered packets.
        time: Simulated time since the last reset.
        utilization_history: (time, utilization snapshot) samples.
    """

    def __init__(
        self,
        topology_factory: Callable[[], Topology] = two_subnet_network,
        seed: int = 42,
        params: Optional[SimulationParams] = None,
        speed: float = DEFAULT_SPEED,
        history_limit: int = 1000,
    ):
        """Initialize the simulation owner.

        Args:
            topology_factory: Builds a fresh topology on init and reset.
            seed: Random seed for reproducibility.
            params: Initial runtime parameters.
            speed: Forwarding speed scale.
            history_limit: Maximum number of retained packets and samples.
        """
        self.topology_factory = topology_factory
        self.seed = seed
        self.params = params or SimulationParams()
        self.speed = speed
        self.history_limit = history_limit

        self.topology: Optional[Topology] = None
        self.engine: Optional[ForwardingEngine] = None
        self.tracker = LinkUtilizationTracker()
        self.generator = PacketGenerator(np.random.default_rng(seed))

        self.packets: List[Packet] = []
        self.completed_packets: Deque[Packet] = deque(maxlen=history_limit)
        self.dropped_packets: Deque[Tuple[Packet, DropReason]] = deque(maxlen=history_limit)
        self.utilization_history: Deque[Tuple[float, Dict[Tuple[str, str], float]]] = deque(
            maxlen=history_limit
        )
        self.drop_counts: Dict[DropReason, int] = defaultdict(int)
        self.packets_generated = 0
        self.packets_delivered = 0
        self.delivered_hops_total = 0
        self._packet_counter = 0
        self.time = 0.0

        self.hooks: Dict[str, List[Callable[..., Any]]] = {
            "packet_generated": [],  # packet enters the network
            "packet_hop": [],  # packet moves between nodes
            "packet_arrived": [],  # packet reaches destination
            "packet_dropped": [],  # packet dropped
            "tick": [],  # an update finished
        }

    def init(self) -> None:
        """Build the topology and clear packets and counters."""
        self.topology = self.topology_factory()
        self.engine = ForwardingEngine(self.topology, self.speed)
        self.generator.reset(np.random.default_rng(self.seed))
        self._clear_state()
        logger.info("initialised %r", self.topology)

    def reset(self) -> None:
        """Rebuild the topology and drop all in-flight packets."""
        self.init()

    def destroy(self) -> None:
        """Release all held collections."""
        self._clear_state()
        self.topology = None
        self.engine = None
        logger.info("destroyed simulation")

    def _clear_state(self) -> None:
        self.packets = []
        self.completed_packets.clear()
        self.dropped_packets.clear()
        self.utilization_history.clear()
        self.drop_counts = defaultdict(int)
        self.packets_generated = 0
        self.packets_delivered = 0
        self.delivered_hops_total = 0
        self._packet_counter = 0
        self.time = 0.0

    def _require_topology(self) -> Topology:
        if self.topology is None or self.engine is None:
            raise RuntimeError("Simulation is not initialised; call init() first")
        return self.topology

    def update(self, dt: float, params: Optional[Mapping[str, Any]] = None) -> List[ForwardingEvent]:
        """Advance the simulation by one frame.

        Generates at most one packet, advances every active packet, removes
        delivered and dropped packets, then recomputes link utilization.

        Args:
            dt: Elapsed simulation time in seconds.
            params: Optional parameter bag (packetGenRate, routingProtocol,
                showLayers).

        Returns:
            Forwarding events produced during the frame.
        """
        topology = self._require_topology()
        if dt < 0:
            raise ValueError(f"dt must not be negative, got {dt}")
        self.params = self.params.merged(params)
        self.time += dt

        packet = self.generator.maybe_generate(
            dt, self.params.packet_gen_rate, topology, self._create_packet
        )
        if packet is not None:
            self.packets.append(packet)
            self.call_hooks("packet_generated", packet, self.time)

        events = self.engine.step(self.packets, dt)
        for event in events:
            self._handle_event(event)
        self.packets = [p for p in self.packets if p.is_active]

        snapshot = self.tracker.update(topology, self.packets)
        self.utilization_history.append((self.time, snapshot))
        self.call_hooks("tick", self, self.time)
        return events

    def send_packet(self, source_id: str, dest_address: str) -> Packet:
        """Inject a packet at a node, as the generator would.

        The packet makes its first routing decision on the next update.

        Args:
            source_id: Node ID the packet starts from.
            dest_address: Destination address.

        Returns:
            The created packet.
        """
        topology = self._require_topology()
        if topology.node(source_id) is None:
            raise ValueError(f"Node {source_id} does not exist")
        packet = self._create_packet(source_id, dest_address)
        self.packets.append(packet)
        self.call_hooks("packet_generated", packet, self.time)
        return packet

    def _create_packet(self, source_id: str, dest_address: str) -> Packet:
        self._packet_counter += 1
        self.packets_generated += 1
        source = self.topology.node(source_id)
        return Packet(
            id=self._packet_counter,
            source_address=source.address,
            dest_address=dest_address,
            current_node=source_id,
            ttl=DEFAULT_TTL,
            payload=f"Hello {self._packet_counter}",
            creation_time=self.time,
        )

    def _handle_event(self, event: ForwardingEvent) -> None:
        if event.kind == "hop":
            self.call_hooks("packet_hop", event.packet, event.previous_node, event.node, self.time)
        elif event.kind == "delivered":
            self.packets_delivered += 1
            self.delivered_hops_total += event.packet.get_hop_count()
            self.completed_packets.append(event.packet)
            self.call_hooks("packet_arrived", event.packet, event.node, self.time)
        elif event.kind == "dropped":
            self.drop_counts[event.reason] += 1
            self.dropped_packets.append((event.packet, event.reason))
            self.call_hooks("packet_dropped", event.packet, event.node, event.reason, self.time)

    def register_hook(self, event_type: str, callback: Callable[..., Any]) -> None:
        """Register a callback function for a specific event type.

        Args:
            event_type: The type of event to register for.
            callback: The function to call when the event occurs.
        """
        if event_type not in self.hooks:
            raise ValueError(f"Unknown hook type: {event_type}")
        self.hooks[event_type].append(callback)

    def call_hooks(self, event_type: str, *args: Any, **kwargs: Any) -> None:
        """Call all registered callbacks for the given event type.

        Args:
            event_type: The type of event that occurred.
            *args, **kwargs: Arguments to pass to the callback functions.
        """
        for callback in self.hooks.get(event_type, []):
            callback(*args, **kwargs)

    @property
    def packets_dropped(self) -> int:
        return sum(self.drop_counts.values())

    def average_hops(self) -> float:
        """Average completed hops of the active packets."""
        if not self.packets:
            return 0.0
        return sum(p.get_hop_count() for p in self.packets) / len(self.packets)

    def calculate_metrics(self) -> Dict[str, Any]:
        """Calculate performance metrics.

        Returns:
            Dictionary of calculated metrics.
        """
        topology = self._require_topology()
        finished = self.packets_delivered + self.packets_dropped

        return {
            "simulation_time": self.time,
            "routing_protocol": self.params.routing_protocol.label,
            "packets_generated": self.packets_generated,
            "packets_delivered": self.packets_delivered,
            "packets_dropped": self.packets_dropped,
            "active_packets": len(self.packets),
            "packet_loss_rate": self.packets_dropped / finished if finished > 0 else 0.0,
            "average_delivered_hops": (
                self.delivered_hops_total / self.packets_delivered if self.packets_delivered > 0 else 0.0
            ),
            "drops_by_reason": {reason.value: self.drop_counts.get(reason, 0) for reason in DropReason},
            "link_utilization": {link.endpoints: link.utilization for link in topology.links},
        }

    def get_state_description(self) -> str:
        """Summarise the simulation for narration.

        Returns:
            A human readable description.
        """
        topology = self._require_topology()
        in_transit = sum(1 for p in self.packets if p.state is PacketState.IN_TRANSIT)
        latencies = [link.latency for link in topology.links]
        average_latency = sum(latencies) / len(latencies) if latencies else 0.0
        layers = "OSI layer visualization enabled. " if self.params.show_layers else ""
        return (
            f"TCP/IP packet routing simulation with {len(topology.nodes)} nodes and {len(topology.links)} links. "
            f"Using {self.params.routing_protocol.label} protocol. {in_transit} packets currently in transit. "
            f"Average hop count: {self.average_hops():.1f}. "
            f"Average network latency: {average_latency:.1f}ms. "
            f"Packet generation rate: {self.params.packet_gen_rate:g}/second. "
            f"{layers}"
            f"Delivered {self.packets_delivered}, dropped {self.packets_dropped} "
            f"(no route {self.drop_counts.get(DropReason.NO_ROUTE, 0)}, "
            f"link missing {self.drop_counts.get(DropReason.LINK_MISSING, 0)}, "
            f"TTL exhausted {self.drop_counts.get(DropReason.TTL_EXHAUSTED, 0)})."
        )

    def run(
        self,
        duration: float,
        dt: float = 1 / 60,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Run the simulation for a specified duration at a fixed frame rate.

        Args:
            duration: Simulation duration in seconds.
            dt: Frame interval in seconds.
            params: Parameter bag passed to every update.

        Returns:
            Dictionary of calculated metrics.
        """
        if dt <= 0:
            raise ValueError(f"dt must be positive, got {dt}")
        if self.topology is None:
            self.init()

        env = simpy.Environment()

        def frame_driver():
            while True:
                yield env.timeout(dt)
                self.update(dt, params)

        env.process(frame_driver())
        env.run(until=duration)
        return self.calculate_metrics()
