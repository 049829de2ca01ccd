# =============================================================================
# Dynamic Network Simulator - Core Data Structures
# =============================================================================
"""
Core data structures for representing network elements and sessions.
These are the fundamental building blocks of the simulation state.

Every record converts to and from plain dictionaries so that an external
save/load layer can persist the model verbatim.
"""

from dataclasses import dataclass, field, fields
from typing import Dict, List, Optional, Tuple, Any
import random
import uuid

from .enums import (
    NodeType, PortStatus, VulnerabilityType, Severity, AuthLevel,
    BackdoorType, DataType, Sensitivity
)


def clamp(value, low=0, high=100):
    """Clamp a score into [low, high]"""
    return max(low, min(high, value))


def make_id(prefix: str, rng: Optional[random.Random] = None) -> str:
    """Build a prefixed unique id; seeded generators give repeatable ids"""
    if rng is None:
        return f"{prefix}_{uuid.uuid4().hex[:12]}"
    return f"{prefix}_{rng.getrandbits(48):012x}"


# =============================================================================
# Vulnerability
# =============================================================================

@dataclass
class Vulnerability:
    """
    Represents an exploitable flaw behind a single port.

    Attributes:
        id: Unique identifier for this vulnerability
        vuln_type: Category of the flaw
        severity: low / medium / high / critical
        cve: Identifier string (e.g. "CVE-2023-0042")
        description: Human-readable summary
        exploit_difficulty: How hard it is to exploit (1 - 10)
        patchable: Whether the defense simulator can patch it away
    """
    id: str
    vuln_type: VulnerabilityType
    severity: Severity
    cve: str
    description: str
    exploit_difficulty: int
    patchable: bool = True

    def __post_init__(self):
        """Validate vulnerability parameters"""
        self.exploit_difficulty = clamp(self.exploit_difficulty, 1, 10)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "vuln_type": self.vuln_type.value,
            "severity": self.severity.value,
            "cve": self.cve,
            "description": self.description,
            "exploit_difficulty": self.exploit_difficulty,
            "patchable": self.patchable,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Vulnerability":
        return cls(
            id=data["id"],
            vuln_type=VulnerabilityType(data["vuln_type"]),
            severity=Severity(data["severity"]),
            cve=data["cve"],
            description=data["description"],
            exploit_difficulty=data["exploit_difficulty"],
            patchable=data["patchable"],
        )


# =============================================================================
# Network Port
# =============================================================================

@dataclass
class NetworkPort:
    """A service endpoint on a node, optionally carrying one vulnerability"""
    number: int
    service: str
    status: PortStatus = PortStatus.CLOSED
    vulnerability: Optional[Vulnerability] = None
    banner: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.status == PortStatus.OPEN

    @property
    def is_exploitable(self) -> bool:
        return self.is_open and self.vulnerability is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "number": self.number,
            "service": self.service,
            "status": self.status.value,
            "vulnerability": self.vulnerability.to_dict() if self.vulnerability else None,
            "banner": self.banner,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NetworkPort":
        vuln = data.get("vulnerability")
        return cls(
            number=data["number"],
            service=data["service"],
            status=PortStatus(data["status"]),
            vulnerability=Vulnerability.from_dict(vuln) if vuln else None,
            banner=data.get("banner"),
        )


# =============================================================================
# Security Level
# =============================================================================

@dataclass
class SecurityLevel:
    """Security posture of a node or subnet"""
    encryption: int = 0  # 0 - 100
    authentication: AuthLevel = AuthLevel.NONE
    monitoring: int = 0  # 0 - 100
    firewall: bool = False
    ids: bool = False  # Intrusion Detection System
    honeypots: int = 0

    def __post_init__(self):
        self.encryption = clamp(self.encryption)
        self.monitoring = clamp(self.monitoring)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "encryption": self.encryption,
            "authentication": self.authentication.value,
            "monitoring": self.monitoring,
            "firewall": self.firewall,
            "ids": self.ids,
            "honeypots": self.honeypots,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SecurityLevel":
        return cls(
            encryption=data["encryption"],
            authentication=AuthLevel(data["authentication"]),
            monitoring=data["monitoring"],
            firewall=data["firewall"],
            ids=data["ids"],
            honeypots=data["honeypots"],
        )


# =============================================================================
# Backdoor
# =============================================================================

@dataclass
class Backdoor:
    """
    A persistence mechanism installed on a compromised node.

    discovery_risk only grows while the backdoor is active. Once
    discovered (active=False) the record stays on the node for good.
    """
    id: str
    backdoor_type: BackdoorType
    install_time: float
    last_used: float
    discovery_risk: int = 10  # 0 - 100
    active: bool = True
    payload: str = ""
    trigger_condition: Optional[str] = None

    def __post_init__(self):
        self.discovery_risk = clamp(self.discovery_risk)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "backdoor_type": self.backdoor_type.value,
            "install_time": self.install_time,
            "last_used": self.last_used,
            "discovery_risk": self.discovery_risk,
            "active": self.active,
            "payload": self.payload,
            "trigger_condition": self.trigger_condition,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Backdoor":
        return cls(
            id=data["id"],
            backdoor_type=BackdoorType(data["backdoor_type"]),
            install_time=data["install_time"],
            last_used=data["last_used"],
            discovery_risk=data["discovery_risk"],
            active=data["active"],
            payload=data["payload"],
            trigger_condition=data.get("trigger_condition"),
        )


# =============================================================================
# Network Data
# =============================================================================

@dataclass(frozen=True)
class NetworkData:
    """A data record stored on a node. Immutable once generated."""
    id: str
    data_type: DataType
    value: int  # Credits
    size: int  # MB
    encrypted: bool
    sensitivity: Sensitivity
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "data_type": self.data_type.value,
            "value": self.value,
            "size": self.size,
            "encrypted": self.encrypted,
            "sensitivity": self.sensitivity.value,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NetworkData":
        return cls(
            id=data["id"],
            data_type=DataType(data["data_type"]),
            value=data["value"],
            size=data["size"],
            encrypted=data["encrypted"],
            sensitivity=Sensitivity(data["sensitivity"]),
            description=data["description"],
        )


# =============================================================================
# Network Node
# =============================================================================

@dataclass
class NetworkNode:
    """
    Represents a single host in a generated network.

    Nodes are created at generation time and never added or removed
    afterwards; only their internal fields change.
    """
    id: str
    node_type: NodeType
    name: str = ""
    address: str = ""

    # Services and posture
    ports: List[NetworkPort] = field(default_factory=list)
    security: SecurityLevel = field(default_factory=SecurityLevel)

    # Attacker state
    compromised: bool = False
    backdoors: List[Backdoor] = field(default_factory=list)

    # Connectivity (symmetric, populated by the topology generator)
    connections: List[str] = field(default_factory=list)

    data: List[NetworkData] = field(default_factory=list)
    last_accessed: float = 0.0
    alert_level: int = 0  # 0 - 100
    patch_level: int = 0  # 0 - 100, only ever raised by the defense

    # Cosmetic layout coordinates
    position: Tuple[float, float] = (0.0, 0.0)

    def __post_init__(self):
        self.alert_level = clamp(self.alert_level)
        self.patch_level = clamp(self.patch_level)
        if not self.name:
            self.name = f"{self.node_type.value}_{self.id}"

    @property
    def is_honeypot(self) -> bool:
        return self.node_type == NodeType.HONEYPOT

    @property
    def open_ports(self) -> List[NetworkPort]:
        return [p for p in self.ports if p.is_open]

    @property
    def vulnerabilities(self) -> List[Vulnerability]:
        return [p.vulnerability for p in self.ports if p.vulnerability is not None]

    @property
    def active_backdoors(self) -> List[Backdoor]:
        return [b for b in self.backdoors if b.active]

    def get_port(self, number: int) -> Optional[NetworkPort]:
        for port in self.ports:
            if port.number == number:
                return port
        return None

    def connect(self, other: "NetworkNode") -> bool:
        """
        Add an undirected edge to another node.
        Returns False if the edge already exists or would be a self loop.
        """
        if other.id == self.id or other.id in self.connections:
            return False
        self.connections.append(other.id)
        other.connections.append(self.id)
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "id": self.id,
            "node_type": self.node_type.value,
            "name": self.name,
            "address": self.address,
            "ports": [p.to_dict() for p in self.ports],
            "security": self.security.to_dict(),
            "compromised": self.compromised,
            "backdoors": [b.to_dict() for b in self.backdoors],
            "connections": list(self.connections),
            "data": [d.to_dict() for d in self.data],
            "last_accessed": self.last_accessed,
            "alert_level": self.alert_level,
            "patch_level": self.patch_level,
            "position": list(self.position),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NetworkNode":
        return cls(
            id=data["id"],
            node_type=NodeType(data["node_type"]),
            name=data["name"],
            address=data["address"],
            ports=[NetworkPort.from_dict(p) for p in data["ports"]],
            security=SecurityLevel.from_dict(data["security"]),
            compromised=data["compromised"],
            backdoors=[Backdoor.from_dict(b) for b in data["backdoors"]],
            connections=list(data["connections"]),
            data=[NetworkData.from_dict(d) for d in data["data"]],
            last_accessed=data.get("last_accessed", 0.0),
            alert_level=data["alert_level"],
            patch_level=data["patch_level"],
            position=tuple(data["position"]),
        )


# =============================================================================
# Network Subnet
# =============================================================================

@dataclass
class NetworkSubnet:
    """A contiguous group of nodes sharing an address range"""
    id: str
    name: str
    cidr: str
    node_ids: List[str] = field(default_factory=list)
    security: SecurityLevel = field(default_factory=SecurityLevel)
    isolated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "cidr": self.cidr,
            "node_ids": list(self.node_ids),
            "security": self.security.to_dict(),
            "isolated": self.isolated,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NetworkSubnet":
        return cls(
            id=data["id"],
            name=data["name"],
            cidr=data["cidr"],
            node_ids=list(data["node_ids"]),
            security=SecurityLevel.from_dict(data["security"]),
            isolated=data["isolated"],
        )


# =============================================================================
# Traceback Event
# =============================================================================

@dataclass(frozen=True)
class TracebackEvent:
    """One entry of a network's append-only intrusion log"""
    id: str
    timestamp: float
    source_address: str
    target_node: str
    action: str
    suspicion_generated: int
    detected: bool
    evidence: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "source_address": self.source_address,
            "target_node": self.target_node,
            "action": self.action,
            "suspicion_generated": self.suspicion_generated,
            "detected": self.detected,
            "evidence": list(self.evidence),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TracebackEvent":
        return cls(
            id=data["id"],
            timestamp=data["timestamp"],
            source_address=data["source_address"],
            target_node=data["target_node"],
            action=data["action"],
            suspicion_generated=data["suspicion_generated"],
            detected=data["detected"],
            evidence=tuple(data["evidence"]),
        )


# =============================================================================
# Session Command
# =============================================================================

@dataclass(frozen=True)
class SessionCommand:
    """A command issued by the player during a hacking session"""
    command: str
    timestamp: float
    node_id: str = ""
    success: bool = True
    suspicion_generated: int = 0
    time_spent: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "command": self.command,
            "timestamp": self.timestamp,
            "node_id": self.node_id,
            "success": self.success,
            "suspicion_generated": self.suspicion_generated,
            "time_spent": self.time_spent,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionCommand":
        return cls(**{f.name: data[f.name] for f in fields(cls) if f.name in data})


# =============================================================================
# Hacking Session
# =============================================================================

@dataclass
class HackingSession:
    """
    The attacker's live session against one network.

    command_history only keeps the newest commands; total_commands and
    failed_commands count every command ever recorded.
    """
    id: str
    network_id: str
    player_id: str
    start_time: float
    origin_address: str = "127.0.0.1"
    current_node: Optional[str] = None
    command_history: List[SessionCommand] = field(default_factory=list)
    suspicion_level: int = 0
    compromised_nodes: List[str] = field(default_factory=list)
    discovered_nodes: List[str] = field(default_factory=list)
    active_backdoors: List[str] = field(default_factory=list)
    traceback_risk: int = 0  # derived, refreshed on every command
    total_commands: int = 0
    failed_commands: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "network_id": self.network_id,
            "player_id": self.player_id,
            "start_time": self.start_time,
            "origin_address": self.origin_address,
            "current_node": self.current_node,
            "command_history": [c.to_dict() for c in self.command_history],
            "suspicion_level": self.suspicion_level,
            "compromised_nodes": list(self.compromised_nodes),
            "discovered_nodes": list(self.discovered_nodes),
            "active_backdoors": list(self.active_backdoors),
            "traceback_risk": self.traceback_risk,
            "total_commands": self.total_commands,
            "failed_commands": self.failed_commands,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HackingSession":
        history = [SessionCommand.from_dict(c) for c in data["command_history"]]
        return cls(
            id=data["id"],
            network_id=data["network_id"],
            player_id=data["player_id"],
            start_time=data["start_time"],
            origin_address=data.get("origin_address", "127.0.0.1"),
            current_node=data.get("current_node"),
            command_history=history,
            suspicion_level=data["suspicion_level"],
            compromised_nodes=list(data["compromised_nodes"]),
            discovered_nodes=list(data["discovered_nodes"]),
            active_backdoors=list(data["active_backdoors"]),
            traceback_risk=data["traceback_risk"],
            total_commands=data.get("total_commands", len(history)),
            failed_commands=data.get(
                "failed_commands", sum(1 for c in history if not c.success)
            ),
        )


# =============================================================================
# Simulation Configuration
# =============================================================================

@dataclass
class SimulationConfig:
    """
    Tunable policy for generation, sessions and the defense tick.
    Per-difficulty baselines live on the Difficulty enum.
    """
    # Generation
    default_node_count: int = 10
    max_nodes: int = 1000
    min_ports: int = 3
    max_ports: int = 7
    port_open_probability: float = 0.7
    patchable_probability: float = 0.8
    extra_connection_ratio: float = 0.3
    honeypot_ratio: float = 0.1
    subnet_isolation_probability: float = 0.3

    # Backdoors
    initial_discovery_risk: int = 10

    # Defense tick
    patch_probability: float = 0.1
    max_patch_increment: int = 5
    max_risk_increment: int = 3
    discovery_alert_increase: int = 30
    discovery_global_alert_increase: int = 10
    vulnerability_patch_probability: float = 0.05

    # Sessions
    detection_threshold: int = 20
    default_origin_address: str = "127.0.0.1"
    max_command_history: int = 500
    max_traceback_events: int = 1000
    max_event_history: int = 1000

    # Random seed for reproducibility
    seed: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimulationConfig":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})
