#!/usr/bin/env python3
"""Command line entry point for the routing simulation."""

import argparse
import logging
import os

from routing_sim.core.simulator import RoutingSimulation
from routing_sim.utils.metrics import save_metrics_to_json
from routing_sim.utils.visualization import plot_link_utilizations, save_network_visualization


def print_metrics(metrics):
    """Print a metrics summary.

    Args:
        metrics: Metrics dictionary
    """
    print(f"Packets generated: {metrics['packets_generated']}")
    print(f"Packets delivered: {metrics['packets_delivered']}")
    print(f"Packets dropped: {metrics['packets_dropped']}")
    for reason, count in metrics["drops_by_reason"].items():
        print(f"  {reason}: {count}")
    print(f"Packet Loss Rate: {metrics['packet_loss_rate']*100:.2f}%")
    print(f"Average hops (delivered): {metrics['average_delivered_hops']:.2f}")
    print(f"Active packets: {metrics['active_packets']}")


def main():
    """Main function to run the simulation"""
    parser = argparse.ArgumentParser(description="TCP/IP Packet Routing Simulation")
    parser.add_argument("--duration", type=float, default=30.0, help="Simulated seconds to run")
    parser.add_argument("--dt", type=float, default=1 / 60, help="Frame interval in seconds")
    parser.add_argument("--rate", type=float, default=2.0, help="Packets generated per second")
    parser.add_argument(
        "--protocol",
        choices=["static", "rip", "ospf"],
        default="static",
        help="Routing protocol label (forwarding is always static)",
    )
    parser.add_argument("--hide-layers", action="store_true", help="Disable the OSI layer hint")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--output-dir", default=None, help="Write metrics and plots here")
    parser.add_argument("--verbose", "-v", action="count", default=0, help="Log lifecycle (-v) and packets (-vv)")

    args = parser.parse_args()

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    params = {
        "packetGenRate": args.rate,
        "routingProtocol": args.protocol,
        "showLayers": not args.hide_layers,
    }

    sim = RoutingSimulation(seed=args.seed)
    sim.init()

    print("\n=== Running Routing Simulation ===")
    metrics = sim.run(args.duration, dt=args.dt, params=params)

    print(sim.get_state_description())
    print()
    print_metrics(metrics)

    if args.output_dir:
        os.makedirs(args.output_dir, exist_ok=True)
        save_metrics_to_json(metrics, os.path.join(args.output_dir, "metrics.json"))
        save_network_visualization(sim, os.path.join(args.output_dir, "topology.png"))
        plot_link_utilizations(sim.utilization_history, os.path.join(args.output_dir, "link_utilization.png"))
        print(f"\nResults written to {args.output_dir}")


if __name__ == "__main__":
    main()
