"""Routing table for routing simulation.

This module defines the RouteEntry and RoutingTable classes. A routing table
is an ordered list of entries and answers longest-prefix-match lookups.
"""

from dataclasses import dataclass, field
from ipaddress import IPv4Address
from typing import Iterator, List, Optional

DIRECT = "direct"
DEFAULT_NETWORK = "0.0.0.0"


def address_to_int(address: str) -> int:
    """Convert a dotted-quad address to its integer value.

    Args:
        address: Address such as "192.168.1.10".

    Returns:
        The address as a 32-bit integer.

    Raises:
        ValueError: If the address is not a valid IPv4 address.
    """
    try:
        return int(IPv4Address(address))
    except ValueError as e:
        raise ValueError(f"Invalid address: {address}") from e


def prefix_length(netmask: str) -> int:
    """Count the set bits of a netmask.

    Args:
        netmask: Netmask such as "255.255.255.0".

    Returns:
        Number of set bits, e.g. 24.
    """
    return bin(address_to_int(netmask)).count("1")


@dataclass(frozen=True)
class RouteEntry:
    """Represents one row of a node's routing table.

    Attributes:
        network: Destination network address.
        netmask: Netmask of the destination prefix.
        next_hop: Either DIRECT or the address of the next node.
        interface: Interface name, display only.
        metric: Route cost, reported but never used for selection.
    """

    network: str
    netmask: str
    next_hop: str
    interface: str = "eth0"
    metric: int = 0
    _network_bits: int = field(init=False, repr=False, compare=False)
    _mask_bits: int = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        """Parse the prefix once and validate the next hop."""
        object.__setattr__(self, "_network_bits", address_to_int(self.network))
        object.__setattr__(self, "_mask_bits", address_to_int(self.netmask))
        if self.next_hop != DIRECT:
            address_to_int(self.next_hop)

    @property
    def prefix_length(self) -> int:
        return bin(self._mask_bits).count("1")

    @property
    def is_default(self) -> bool:
        return self._mask_bits == 0

    @property
    def is_direct(self) -> bool:
        return self.next_hop == DIRECT

    def matches(self, address: str) -> bool:
        """Check whether an address falls inside this entry's prefix.

        Args:
            address: Destination address.

        Returns:
            True if (address & netmask) == (network & netmask). Unparsable
            addresses never match.
        """
        try:
            value = address_to_int(address)
        except ValueError:
            return False
        return (value & self._mask_bits) == (self._network_bits & self._mask_bits)

    def __str__(self) -> str:
        return f"{self.network}/{self.prefix_length} via {self.next_hop} ({self.interface}, metric {self.metric})"


class RoutingTable:
    """Ordered collection of route entries.

    Insertion order is significant: among entries with equal, maximal prefix
    length the one added first wins.

    Attributes:
        entries: Route entries in insertion order.
    """

    def __init__(self, entries: Optional[List[RouteEntry]] = None) -> None:
        self.entries: List[RouteEntry] = list(entries or [])

    def add(
        self,
        network: str,
        netmask: str,
        next_hop: str,
        interface: str = "eth0",
        metric: int = 0,
    ) -> RouteEntry:
        """Append an entry to the table.

        Args:
            network: Destination network address.
            netmask: Netmask of the destination prefix.
            next_hop: DIRECT or the next node's address.
            interface: Interface name.
            metric: Route cost.

        Returns:
            The created RouteEntry.
        """
        entry = RouteEntry(network, netmask, next_hop, interface, metric)
        self.entries.append(entry)
        return entry

    def add_default(self, next_hop: str, interface: str = "eth0", metric: int = 1) -> RouteEntry:
        """Append a default route (0.0.0.0/0)."""
        return self.add(DEFAULT_NETWORK, DEFAULT_NETWORK, next_hop, interface, metric)

    def lookup(self, address: str) -> Optional[RouteEntry]:
        """Find the longest-prefix match for a destination address.

        Args:
            address: Destination address.

        Returns:
            The matching entry with the greatest prefix length, the earliest
            inserted one on a tie, or None if nothing matches.
        """
        best: Optional[RouteEntry] = None
        longest = -1
        for entry in self.entries:
            if entry.matches(address) and entry.prefix_length > longest:
                best = entry
                longest = entry.prefix_length
        return best

    def resolve_next_hop(self, address: str) -> Optional[str]:
        """Resolve the next hop address for a destination.

        Args:
            address: Destination address.

        Returns:
            The destination itself for a directly attached prefix, the next
            node's address otherwise, or None when no entry matches.
        """
        entry = self.lookup(address)
        if entry is None:
            return None
        if entry.is_direct:
            return address
        return entry.next_hop

    def clear(self) -> None:
        self.entries.clear()

    def __iter__(self) -> Iterator[RouteEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"RoutingTable({len(self.entries)} entries)"
