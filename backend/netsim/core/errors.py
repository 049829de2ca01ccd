# =============================================================================
# Dynamic Network Simulator - Errors
# =============================================================================
"""
Exceptions raised by the simulator.

Lookups of unknown networks, nodes or sessions always raise; simulation
rolls never do.
"""


class SimulatorError(Exception):
    """Base class for all simulator errors"""


class NotFoundError(SimulatorError, LookupError):
    """An id did not resolve to a network, node or session"""

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind.capitalize()} not found: {identifier}")


class InvalidStateError(SimulatorError, RuntimeError):
    """The target exists but is not in a state that allows the operation"""


class InvalidArgumentError(SimulatorError, ValueError):
    """A caller supplied an unusable argument"""
