"""Visualization utilities for routing simulation.

This module provides functions for drawing the network topology with its
current link utilization, and link utilization over time.
"""

import os
from typing import Dict, Iterable, Tuple

import matplotlib.pyplot as plt
import networkx as nx

from routing_sim.core.enums import NodeKind
from routing_sim.core.simulator import RoutingSimulation

NODE_COLORS = {
    NodeKind.HOST: "#10b981",
    NodeKind.SWITCH: "#f59e0b",
    NodeKind.ROUTER: "#3b82f6",
}
DESTINATION_COLOR = "#ef4444"


def save_network_visualization(
    simulation: RoutingSimulation,
    filename: str | None = None,
    figsize: Tuple[int, int] = (10, 6),
) -> None:
    """Save network topology visualization to a file.

    Links are drawn wider and warmer the higher their utilization.

    Args:
        simulation: An initialised RoutingSimulation.
        filename: Output filename, or None to show it immediately.
        figsize: Figure size as (width, height) in inches.
    """
    topology = simulation.topology
    if topology is None:
        raise RuntimeError("Simulation is not initialised; call init() first")

    fig = plt.figure(figsize=figsize)
    graph = topology.graph

    if all(node.position is not None for node in topology.nodes.values()):
        # Canvas coordinates grow downwards.
        pos = {node_id: (node.position[0], -node.position[1]) for node_id, node in topology.nodes.items()}
    else:
        pos = nx.spring_layout(graph, seed=simulation.seed)

    colors = [
        DESTINATION_COLOR if node.is_destination else NODE_COLORS[node.kind]
        for node in topology.nodes.values()
    ]
    nx.draw_networkx_nodes(graph, pos, nodelist=list(topology.nodes), node_size=700, node_color=colors)

    edgelist = [link.endpoints for link in topology.links]
    widths = [2 + 3 * link.utilization / 100 for link in topology.links]
    edge_colors = [link.utilization for link in topology.links]
    nx.draw_networkx_edges(
        graph,
        pos,
        edgelist=edgelist,
        width=widths,
        edge_color=edge_colors,
        edge_cmap=plt.cm.YlOrRd,
        edge_vmin=0,
        edge_vmax=100,
    )

    labels = {node_id: f"{node_id}\n{node.address}" for node_id, node in topology.nodes.items()}
    nx.draw_networkx_labels(graph, pos, labels=labels, font_size=8)

    edge_labels = {link.endpoints: f"{link.latency:g}ms" for link in topology.links}
    nx.draw_networkx_edge_labels(graph, pos, edge_labels=edge_labels, font_size=7)

    plt.axis("off")
    plt.tight_layout()

    if filename:
        directory = os.path.dirname(filename)
        if directory:
            os.makedirs(directory, exist_ok=True)
        fig.savefig(filename)
        plt.close(fig)
    else:
        plt.show()


def plot_link_utilizations(
    history: Iterable[Tuple[float, Dict[Tuple[str, str], float]]],
    filename: str | None = None,
) -> None:
    """Plot link utilization over time.

    Args:
        history: (time, utilization snapshot) samples, as recorded in
            RoutingSimulation.utilization_history.
        filename: Output filename, or None to show it immediately.
    """
    samples = list(history)
    fig, ax = plt.subplots(figsize=(12, 5))

    if samples:
        times = [time for time, _ in samples]
        for link in samples[0][1]:
            values = [snapshot.get(link, 0.0) for _, snapshot in samples]
            if any(values):
                ax.plot(times, values, label=f"{link[0]}->{link[1]}")

    ax.set_title("Link Utilization Over Time")
    ax.set_xlabel("Simulation Time (seconds)")
    ax.set_ylabel("Utilization (%)")
    ax.set_ylim(0, 105)
    ax.grid(True, linestyle="--", alpha=0.7)
    if ax.get_legend_handles_labels()[0]:
        ax.legend()

    plt.tight_layout()

    if filename:
        directory = os.path.dirname(filename)
        if directory:
            os.makedirs(directory, exist_ok=True)
        fig.savefig(filename)
        plt.close(fig)
    else:
        plt.show()
