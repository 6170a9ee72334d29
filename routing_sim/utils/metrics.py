"""Metrics utilities for routing simulation.

This module provides functions for exporting simulation metrics and
rendering routing tables as text.
"""

import json
import os
from typing import Any, Dict

from routing_sim.core.routing_table import RoutingTable


def serializable_metrics(metrics: Dict[str, Any]) -> Dict[str, Any]:
    """Convert metrics to JSON-compatible values.

    Args:
        metrics: Dictionary of metrics from RoutingSimulation.calculate_metrics.

    Returns:
        Copy of the metrics with tuple keys rendered as "a->b".
    """
    result = {}
    for key, value in metrics.items():
        if key == "link_utilization":
            # Convert tuple keys to strings
            result[key] = {f"{src}->{dst}": util for (src, dst), util in value.items()}
        else:
            result[key] = value
    return result


def save_metrics_to_json(metrics: Dict[str, Any], filename: str = "results/metrics.json") -> None:
    """Save metrics to a JSON file.

    Args:
        metrics: Dictionary of metrics to save.
        filename: Output filename.
    """
    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(filename, "w") as f:
        json.dump(serializable_metrics(metrics), f, indent=2)


def format_routing_table(table: RoutingTable) -> str:
    """Render a routing table as aligned text.

    Args:
        table: The routing table.

    Returns:
        One header line plus one line per entry, in lookup order.
    """
    lines = [f"{'Network':<16}{'Netmask':<16}{'Next Hop':<16}{'Iface':<8}Metric"]
    for entry in table:
        lines.append(
            f"{entry.network:<16}{entry.netmask:<16}{entry.next_hop:<16}{entry.interface:<8}{entry.metric}"
        )
    return "\n".join(lines)
