"""Core components for routing simulation.

This module contains the fundamental classes for routing simulation,
including Packet, Link, Node, Topology, RoutingTable, ForwardingEngine and
the RoutingSimulation owner.
"""
