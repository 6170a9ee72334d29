"""Topology model for routing simulation.

This module defines the Topology class, which owns the fixed set of nodes
and links and answers node and link lookups in constant time.
"""

from typing import Dict, Iterable, List, Optional, Tuple

import networkx as nx

from routing_sim.core.link import Link
from routing_sim.core.node import Node
from routing_sim.core.routing_table import RouteEntry


class Topology:
    """Fixed network topology.

    Attributes:
        graph: NetworkX undirected graph keyed by node ID, with the Link
            object stored under the "link" edge attribute.
        nodes: Node objects keyed by node ID.
        links: Link objects in construction order.
    """

    def __init__(self, nodes: Iterable[Node], links: Iterable[Link]) -> None:
        """Build the topology and its lookup indexes.

        Args:
            nodes: Nodes of the network.
            links: Links between the nodes.

        Raises:
            ValueError: On duplicate node IDs or addresses, links to unknown
                nodes, or duplicate links.
        """
        self.graph = nx.Graph()
        self.nodes: Dict[str, Node] = {}
        self.links: List[Link] = []
        self._by_address: Dict[str, Node] = {}

        for node in nodes:
            if node.id in self.nodes:
                raise ValueError(f"Duplicate node id: {node.id}")
            if node.address in self._by_address:
                raise ValueError(
                    f"Duplicate address {node.address} on {node.id} and {self._by_address[node.address].id}"
                )
            self.nodes[node.id] = node
            self._by_address[node.address] = node
            self.graph.add_node(node.id, kind=node.kind.value, address=node.address)

        for link in links:
            source, target = link.endpoints
            if source not in self.nodes or target not in self.nodes:
                raise ValueError(f"Nodes {source} and/or {target} do not exist")
            if self.graph.has_edge(source, target):
                raise ValueError(f"Duplicate link between {source} and {target}")
            self.links.append(link)
            self.graph.add_edge(source, target, link=link, latency=link.latency)

    def node(self, node_id: str) -> Optional[Node]:
        return self.nodes.get(node_id)

    def node_by_address(self, address: str) -> Optional[Node]:
        return self._by_address.get(address)

    def link_between(self, a: str, b: str) -> Optional[Link]:
        """Find the link joining two nodes, in either direction.

        Args:
            a: First node ID.
            b: Second node ID.

        Returns:
            The Link, or None if the nodes are not adjacent.
        """
        data = self.graph.get_edge_data(a, b)
        if data is None:
            return None
        return data["link"]

    def neighbours(self, node_id: str) -> List[str]:
        """List node IDs adjacent to a node."""
        if node_id not in self.graph:
            return []
        return list(self.graph.neighbors(node_id))

    def hosts(self, is_destination: Optional[bool] = None) -> List[Node]:
        """List host nodes, optionally filtered by destination flag.

        Args:
            is_destination: If given, only hosts with this flag.

        Returns:
            Host nodes in construction order.
        """
        return [
            node
            for node in self.nodes.values()
            if node.is_host and (is_destination is None or node.is_destination == is_destination)
        ]

    def reset_utilization(self) -> None:
        for link in self.links:
            link.utilization = 0.0

    def inconsistent_routes(self) -> List[Tuple[str, RouteEntry]]:
        """Find routing entries whose gateway is not an adjacent node.

        Direct entries are skipped since their next hop depends on the
        destination. Packets taking one of the returned entries are dropped
        with a missing link.

        Returns:
            (node ID, entry) pairs.
        """
        problems: List[Tuple[str, RouteEntry]] = []
        for node in self.nodes.values():
            for entry in node.routing_table:
                if entry.is_direct:
                    continue
                gateway = self.node_by_address(entry.next_hop)
                if gateway is None or gateway.id not in self.neighbours(node.id):
                    problems.append((node.id, entry))
        return problems

    def __len__(self) -> int:
        return len(self.nodes)

    def __repr__(self) -> str:
        return f"Topology({len(self.nodes)} nodes, {len(self.links)} links)"
