"""Traffic generators for routing simulation.

This module provides the fixed-rate PacketGenerator, which picks a random
sending host and a random destination host whenever its timer runs out.
"""

from typing import Callable, Optional

import numpy as np

from routing_sim.core.packet import Packet
from routing_sim.core.topology import Topology

PacketFactory = Callable[[str, str], Packet]


def constant_interval(rate: float) -> float:
    """Interval between packets for a constant generation rate.

    Args:
        rate: Rate of packet generation in packets per second.

    Returns:
        Interval between packets in seconds.
    """
    if rate <= 0:
        raise ValueError(f"Rate must be positive, got {rate}")
    return 1 / rate


class PacketGenerator:
    """Fixed-rate packet generator.

    Attributes:
        rng: NumPy random generator used for source/destination choice.
        timer: Simulated time since the last packet was generated.
    """

    def __init__(self, rng: np.random.Generator) -> None:
        self.rng = rng
        self.timer = 0.0

    def reset(self, rng: Optional[np.random.Generator] = None) -> None:
        self.timer = 0.0
        if rng is not None:
            self.rng = rng

    def maybe_generate(
        self,
        dt: float,
        rate: float,
        topology: Topology,
        make_packet: PacketFactory,
    ) -> Optional[Packet]:
        """Advance the timer and emit a packet once the interval has passed.

        At most one packet is emitted per call.

        Args:
            dt: Elapsed simulation time.
            rate: Packets per second.
            topology: Topology providing the source and destination hosts.
            make_packet: Called with (source node ID, destination address).

        Returns:
            The new packet, or None.
        """
        self.timer += dt
        if self.timer <= constant_interval(rate):
            return None
        self.timer = 0.0

        sources = topology.hosts(is_destination=False)
        destinations = topology.hosts(is_destination=True)
        if not sources or not destinations:
            return None

        source = sources[self.rng.integers(len(sources))]
        destination = destinations[self.rng.integers(len(destinations))]
        return make_packet(source.id, destination.address)
