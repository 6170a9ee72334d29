"""Enumerations for routing simulation.

This module defines enumerations used throughout the routing simulator.
"""

from enum import Enum


class NodeKind(Enum):
    """Enum for the kinds of network node.

    Attributes:
        HOST: End host that sends or receives packets.
        SWITCH: Subnet switch uplinking hosts to a router.
        ROUTER: Core router forwarding between subnets.
    """

    HOST = "host"
    SWITCH = "switch"
    ROUTER = "router"


class OsiLayer(Enum):
    """Enum for the cosmetic OSI layer tag carried by packets."""

    PHYSICAL = "physical"
    DATALINK = "datalink"
    NETWORK = "network"
    TRANSPORT = "transport"


class RoutingProtocol(Enum):
    """Enum for the routing protocol label.

    Only STATIC forwarding is computed. RIP and OSPF are display labels.
    """

    STATIC = 0
    RIP = 1
    OSPF = 2

    @property
    def label(self) -> str:
        return {0: "static routing", 1: "RIP", 2: "OSPF"}[self.value]


class PacketState(Enum):
    """Enum for the states of the per-packet forwarding state machine."""

    AT_NODE = 1
    IN_TRANSIT = 2
    DELIVERED = 3
    DROPPED = 4


class DropReason(Enum):
    """Enum for the reasons a packet leaves the network undelivered.

    Attributes:
        NO_ROUTE: No routing table entry matches the destination.
        LINK_MISSING: The resolved next hop is not adjacent to the node.
        TTL_EXHAUSTED: The hop budget reached zero.
    """

    NO_ROUTE = "no route"
    LINK_MISSING = "link missing"
    TTL_EXHAUSTED = "TTL exhausted"
