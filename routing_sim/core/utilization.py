"""Link utilization tracking for routing simulation.

Utilization is a per-tick snapshot: every link is zeroed and then loaded
by the packets currently travelling on it. It is a display metric only and
never slows packets down.
"""

from typing import Dict, Iterable, Tuple

from routing_sim.core.enums import PacketState
from routing_sim.core.link import MAX_UTILIZATION
from routing_sim.core.packet import Packet
from routing_sim.core.topology import Topology

DEFAULT_INCREMENT = 20.0


class LinkUtilizationTracker:
    """Recomputes link utilization from packet positions.

    Attributes:
        increment: Load added per packet occupying a link.
        ceiling: Utilization at which a link saturates.
    """

    def __init__(self, increment: float = DEFAULT_INCREMENT, ceiling: float = MAX_UTILIZATION) -> None:
        if ceiling <= 0:
            raise ValueError(f"Ceiling must be positive, got {ceiling}")
        if not 0 <= increment <= ceiling:
            raise ValueError(f"Increment must be within [0, {ceiling}], got {increment}")
        self.increment = increment
        self.ceiling = ceiling

    def update(self, topology: Topology, packets: Iterable[Packet]) -> Dict[Tuple[str, str], float]:
        """Recompute the utilization of every link.

        Args:
            topology: Topology whose links are updated in place.
            packets: Active packets.

        Returns:
            Utilization snapshot keyed by link endpoints.
        """
        topology.reset_utilization()
        for packet in packets:
            if packet.state is not PacketState.IN_TRANSIT or packet.next_hop_node is None:
                continue
            link = topology.link_between(packet.current_node, packet.next_hop_node)
            if link is not None:
                link.add_load(self.increment, self.ceiling)
        return {link.endpoints: link.utilization for link in topology.links}
