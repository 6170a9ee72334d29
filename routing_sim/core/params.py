"""Runtime parameters for routing simulation.

The owner receives a loosely typed parameter bag on every update. This
module turns it into a validated SimulationParams value.
"""

from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from routing_sim.core.enums import RoutingProtocol

# Accepted spellings for each parameter.
PARAM_KEYS = {
    "packet_gen_rate": ("packetGenRate", "packet_gen_rate"),
    "routing_protocol": ("routingProtocol", "routing_protocol"),
    "show_layers": ("showLayers", "show_layers"),
}


def parse_protocol(value: Any) -> RoutingProtocol:
    """Convert a protocol value to a RoutingProtocol.

    Args:
        value: A RoutingProtocol, its integer value (0, 1, 2) or its name.

    Returns:
        The RoutingProtocol.

    Raises:
        ValueError: If the value names no protocol.
    """
    if isinstance(value, RoutingProtocol):
        return value
    if isinstance(value, str):
        try:
            return RoutingProtocol[value.upper()]
        except KeyError:
            raise ValueError(f"Unknown routing protocol: {value}") from None
    try:
        return RoutingProtocol(int(value))
    except (TypeError, ValueError):
        raise ValueError(f"Unknown routing protocol: {value}") from None


@dataclass(frozen=True)
class SimulationParams:
    """Runtime-tunable simulation parameters.

    Attributes:
        packet_gen_rate: Packets generated per simulated second, > 0.
        routing_protocol: Protocol label. Forwarding is always static.
        show_layers: Rendering hint, no effect on forwarding.
    """

    packet_gen_rate: float = 2.0
    routing_protocol: RoutingProtocol = RoutingProtocol.STATIC
    show_layers: bool = True

    def __post_init__(self):
        if not self.packet_gen_rate > 0:
            raise ValueError(f"packet_gen_rate must be positive, got {self.packet_gen_rate}")

    def merged(self, params: Optional[Mapping[str, Any]]) -> "SimulationParams":
        """Overlay a parameter bag on these parameters.

        Args:
            params: Mapping using camelCase or snake_case keys. Missing keys
                keep their current value, unknown keys are ignored.

        Returns:
            New SimulationParams.
        """
        if not params:
            return self
        changes = {}
        for attribute, keys in PARAM_KEYS.items():
            for key in keys:
                if key in params and params[key] is not None:
                    changes[attribute] = params[key]
                    break
        if "packet_gen_rate" in changes:
            changes["packet_gen_rate"] = float(changes["packet_gen_rate"])
        if "routing_protocol" in changes:
            changes["routing_protocol"] = parse_protocol(changes["routing_protocol"])
        if "show_layers" in changes:
            changes["show_layers"] = bool(changes["show_layers"])
        return replace(self, **changes)
