# =============================================================================
# Dynamic Network Simulator - Network Map
# =============================================================================
"""
The complete state of one generated network.

A NetworkMap is created once by the topology generator, owned by the
network store, and mutated in place by sessions and the defense tick.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any

import numpy as np

from .enums import NodeType, Difficulty
from .errors import NotFoundError
from .data_structures import NetworkNode, NetworkSubnet, TracebackEvent, clamp


@dataclass
class NetworkMap:
    """
    Nodes keyed by id, their subnets, and the append-only traceback log.
    """

    # ==========================================================================
    # Identifiers
    # ==========================================================================
    id: str
    name: str
    difficulty: Difficulty

    # ==========================================================================
    # Topology
    # ==========================================================================
    nodes: Dict[str, NetworkNode] = field(default_factory=dict)
    subnets: List[NetworkSubnet] = field(default_factory=list)

    # ==========================================================================
    # Defense State
    # ==========================================================================
    traceback_events: List[TracebackEvent] = field(default_factory=list)
    global_alert_level: int = 0  # 0 - 100
    last_scan: float = 0.0

    def __post_init__(self):
        self.global_alert_level = clamp(self.global_alert_level)

    # ==========================================================================
    # Properties
    # ==========================================================================

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def compromised_nodes(self) -> List[NetworkNode]:
        return [n for n in self.nodes.values() if n.compromised]

    @property
    def honeypots(self) -> List[NetworkNode]:
        return self.get_nodes_by_type(NodeType.HONEYPOT)

    @property
    def detected_events(self) -> List[TracebackEvent]:
        return [e for e in self.traceback_events if e.detected]

    # ==========================================================================
    # Lookups
    # ==========================================================================

    def get_node(self, node_id: str) -> NetworkNode:
        """Get a node by id, raising NotFoundError for unknown ids"""
        node = self.nodes.get(node_id)
        if node is None:
            raise NotFoundError("node", node_id)
        return node

    def get_neighbors(self, node_id: str) -> List[NetworkNode]:
        node = self.get_node(node_id)
        return [self.nodes[n] for n in node.connections if n in self.nodes]

    def get_nodes_by_type(self, node_type: NodeType) -> List[NetworkNode]:
        return [n for n in self.nodes.values() if n.node_type == node_type]

    def get_subnet_for(self, node_id: str) -> Optional[NetworkSubnet]:
        for subnet in self.subnets:
            if node_id in subnet.node_ids:
                return subnet
        return None

    def raise_global_alert(self, amount: int):
        self.global_alert_level = clamp(self.global_alert_level + amount)

    # ==========================================================================
    # Graph Invariants
    # ==========================================================================

    def is_symmetric(self) -> bool:
        """Every edge is listed on both of its endpoints"""
        for node in self.nodes.values():
            for other_id in node.connections:
                other = self.nodes.get(other_id)
                if other is None or node.id not in other.connections:
                    return False
        return True

    def is_connected(self) -> bool:
        """Every node can reach every other node through connections"""
        if not self.nodes:
            return True

        start = next(iter(self.nodes))
        visited = {start}
        queue = deque([start])
        while queue:
            current = queue.popleft()
            for other in self.nodes[current].connections:
                if other in self.nodes and other not in visited:
                    visited.add(other)
                    queue.append(other)
        return len(visited) == len(self.nodes)

    def subnets_partition_nodes(self) -> bool:
        """Each node belongs to exactly one subnet"""
        assigned = [nid for s in self.subnets for nid in s.node_ids]
        return len(assigned) == len(set(assigned)) and set(assigned) == set(self.nodes)

    # ==========================================================================
    # Numeric Export
    # ==========================================================================

    def node_order(self) -> List[str]:
        """Stable row/column order used by the matrix exports"""
        return list(self.nodes.keys())

    def adjacency_matrix(self) -> np.ndarray:
        """Symmetric 0/1 adjacency matrix in node_order()"""
        order = self.node_order()
        index = {node_id: i for i, node_id in enumerate(order)}
        matrix = np.zeros((len(order), len(order)), dtype=np.int8)
        for node_id, node in self.nodes.items():
            for other in node.connections:
                if other in index:
                    matrix[index[node_id], index[other]] = 1
        return matrix

    def feature_matrix(self) -> np.ndarray:
        """
        One row per node in node_order(), scores scaled to [0, 1].

        Columns:
            0: alert level
            1: patch level
            2: encryption
            3: monitoring
            4: open port ratio
            5: exploitable port ratio
            6: active backdoors (saturating at 5)
            7: compromised flag
            8: honeypot flag
        """
        rows = []
        for node_id in self.node_order():
            node = self.nodes[node_id]
            port_count = max(1, len(node.ports))
            rows.append([
                node.alert_level / 100.0,
                node.patch_level / 100.0,
                node.security.encryption / 100.0,
                node.security.monitoring / 100.0,
                len(node.open_ports) / port_count,
                sum(1 for p in node.ports if p.is_exploitable) / port_count,
                min(len(node.active_backdoors), 5) / 5.0,
                1.0 if node.compromised else 0.0,
                1.0 if node.is_honeypot else 0.0,
            ])
        return np.array(rows, dtype=np.float32).reshape(len(rows), 9)

    # ==========================================================================
    # Serialization
    # ==========================================================================

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "difficulty": self.difficulty.value,
            "nodes": {node_id: node.to_dict() for node_id, node in self.nodes.items()},
            "subnets": [s.to_dict() for s in self.subnets],
            "traceback_events": [e.to_dict() for e in self.traceback_events],
            "global_alert_level": self.global_alert_level,
            "last_scan": self.last_scan,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NetworkMap":
        return cls(
            id=data["id"],
            name=data["name"],
            difficulty=Difficulty(data["difficulty"]),
            nodes={k: NetworkNode.from_dict(v) for k, v in data["nodes"].items()},
            subnets=[NetworkSubnet.from_dict(s) for s in data["subnets"]],
            traceback_events=[TracebackEvent.from_dict(e) for e in data["traceback_events"]],
            global_alert_level=data["global_alert_level"],
            last_scan=data.get("last_scan", 0.0),
        )

    def __str__(self) -> str:
        return (
            f"NetworkMap({self.name}, {self.difficulty.value}, "
            f"{self.node_count} nodes, {len(self.subnets)} subnets, "
            f"alert={self.global_alert_level})"
        )
