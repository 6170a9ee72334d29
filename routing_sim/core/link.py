"""Link class for routing simulation.

This module defines the Link class, which represents an undirected
connection between two nodes in the simulated network.
"""

from typing import Tuple

MAX_UTILIZATION = 100.0


class Link:
    """Represents an undirected network link between nodes.

    Attributes:
        from_node: First endpoint node ID.
        to_node: Second endpoint node ID.
        latency: Latency in milliseconds, governs packet travel speed.
        bandwidth: Capacity in Mbps, display only.
        utilization: Load snapshot in [0, 100], recomputed every tick.
    """

    def __init__(
        self,
        from_node: str,
        to_node: str,
        latency: float,
        bandwidth: float = 100.0,
    ):
        """Initialize a network link.

        Args:
            from_node: First endpoint node ID.
            to_node: Second endpoint node ID.
            latency: Latency in milliseconds.
            bandwidth: Capacity in Mbps.
        """
        if from_node == to_node:
            raise ValueError(f"Link cannot connect {from_node} to itself")
        if latency <= 0:
            raise ValueError(f"Link latency must be positive, got {latency}")
        self.from_node = from_node
        self.to_node = to_node
        self.latency = latency
        self.bandwidth = bandwidth
        self.utilization = 0.0

    @property
    def endpoints(self) -> Tuple[str, str]:
        return self.from_node, self.to_node

    def add_load(self, amount: float, ceiling: float = MAX_UTILIZATION) -> None:
        """Add load to the utilization snapshot, clamped to a ceiling.

        Args:
            amount: Load to add.
            ceiling: Highest utilization the snapshot may reach.
        """
        self.utilization = min(ceiling, self.utilization + amount)

    def __repr__(self) -> str:
        """Return string representation of the link.

        Returns:
            String representation of the link.
        """
        return f"Link({self.from_node}<->{self.to_node}, {self.bandwidth:g}Mbps, {self.latency:g}ms)"
