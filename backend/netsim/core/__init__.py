# =============================================================================
# Core Simulator Module
# =============================================================================
"""
Core simulator components including:
- Network data model
- Topology generation
- Hacking sessions and traceback risk
- Backdoor lifecycle
- Defense ticks
"""

from .enums import (
    NodeType, PortStatus, VulnerabilityType, Severity, AuthLevel,
    BackdoorType, DataType, Sensitivity, Difficulty
)
from .errors import SimulatorError, NotFoundError, InvalidStateError, InvalidArgumentError
from .data_structures import (
    Vulnerability, NetworkPort, SecurityLevel, Backdoor, NetworkData,
    NetworkNode, NetworkSubnet, TracebackEvent, SessionCommand,
    HackingSession, SimulationConfig
)
from .network_map import NetworkMap
from .network_topology import NetworkTopologyGenerator, generate_network
from .network_store import NetworkStore
from .session_manager import SessionManager
from .backdoors import BackdoorManager
from .defense import DefenseSimulator, DefenseReport
from .simulator import NetworkSimulator, SimulationEvent, SimulationEventType, create_simulator

__all__ = [
    # Enums
    "NodeType", "PortStatus", "VulnerabilityType", "Severity", "AuthLevel",
    "BackdoorType", "DataType", "Sensitivity", "Difficulty",
    # Errors
    "SimulatorError", "NotFoundError", "InvalidStateError", "InvalidArgumentError",
    # Data structures
    "Vulnerability", "NetworkPort", "SecurityLevel", "Backdoor", "NetworkData",
    "NetworkNode", "NetworkSubnet", "TracebackEvent", "SessionCommand",
    "HackingSession", "SimulationConfig", "NetworkMap",
    # Core classes
    "NetworkTopologyGenerator", "NetworkStore", "SessionManager",
    "BackdoorManager", "DefenseSimulator", "DefenseReport",
    "NetworkSimulator", "SimulationEvent", "SimulationEventType",
    # Convenience functions
    "generate_network", "create_simulator",
]
