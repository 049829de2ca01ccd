# =============================================================================
# Dynamic Network Simulator - Network Topology Generator
# =============================================================================
"""
Generates procedural target networks.

Generation is a pipeline of independent passes:
1. typed nodes (ports, vulnerabilities, security, data)
2. connections (spanning chain first, then random extra edges)
3. subnets (contiguous partition, addresses inside each CIDR)
4. trap placement (a fraction of nodes re-typed as honeypots)
"""

import dataclasses
import logging
import random
from typing import List, Optional, Union

from .enums import (
    NodeType, PortStatus, VulnerabilityType, Severity, AuthLevel,
    DataType, Difficulty, SERVICE_BANNERS, get_service_name
)
from .errors import InvalidArgumentError
from .data_structures import (
    NetworkNode, NetworkPort, Vulnerability, SecurityLevel,
    NetworkData, NetworkSubnet, SimulationConfig, clamp, make_id
)
from .network_map import NetworkMap

logger = logging.getLogger(__name__)


class NetworkTopologyGenerator:
    """
    Builds NetworkMaps for a given difficulty and size.

    All randomness goes through the injected random.Random, so a seeded
    generator reproduces the same network.
    """

    NAME_PREFIXES = ["Corp", "Secure", "Data", "Cyber", "Net", "Info", "Tech", "Digital"]
    NAME_SUFFIXES = ["Systems", "Network", "Infrastructure", "Grid", "Hub", "Core", "Base"]

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        rng: Optional[random.Random] = None
    ):
        """Initialize the generator with optional config and random source"""
        self.config = config or SimulationConfig()
        self.rng = rng or random.Random(self.config.seed)
        self.vulnerability_counter = 0

    def generate(
        self,
        difficulty: Union[Difficulty, str] = Difficulty.MEDIUM,
        node_count: Optional[int] = None
    ) -> NetworkMap:
        """
        Generate a network.

        Args:
            difficulty: Difficulty tag (enum or "easy"/"medium"/"hard"/"expert")
            node_count: Number of nodes, defaults to config.default_node_count

        Returns:
            A connected NetworkMap whose subnets partition its nodes

        Raises:
            InvalidArgumentError: non-positive or oversized node_count,
                unknown difficulty
        """
        difficulty = Difficulty.parse(difficulty)
        if node_count is None:
            node_count = self.config.default_node_count
        if isinstance(node_count, bool) or not isinstance(node_count, int):
            raise InvalidArgumentError(f"node_count must be an integer, got {node_count!r}")
        if node_count <= 0:
            raise InvalidArgumentError(f"node_count must be positive, got {node_count}")
        if node_count > self.config.max_nodes:
            raise InvalidArgumentError(
                f"node_count {node_count} exceeds the limit of {self.config.max_nodes}"
            )

        network = NetworkMap(
            id=make_id("network", self.rng),
            name=self._generate_network_name(),
            difficulty=difficulty,
        )

        nodes = self._generate_nodes(node_count, difficulty)
        network.nodes = {node.id: node for node in nodes}

        self._generate_connections(network)
        network.subnets = self._generate_subnets(network)
        self._place_honeypots(network)

        logger.debug(
            "Generated %s: %d nodes, %d subnets, %d honeypots",
            network.id, network.node_count, len(network.subnets), len(network.honeypots)
        )
        return network

    def _generate_network_name(self) -> str:
        return self.rng.choice(self.NAME_PREFIXES) + self.rng.choice(self.NAME_SUFFIXES)

    # =========================================================================
    # Phase 1: Typed Nodes
    # =========================================================================

    def _generate_nodes(self, count: int, difficulty: Difficulty) -> List[NetworkNode]:
        node_types = list(NodeType)
        weights = [t.generation_weight for t in node_types]

        nodes = []
        for i in range(count):
            node_type = self.rng.choices(node_types, weights=weights)[0]
            nodes.append(NetworkNode(
                id=f"node_{i}",
                node_type=node_type,
                name=self.rng.choice(node_type.name_pool),
                ports=self._generate_ports(node_type, difficulty),
                security=self._generate_security(node_type, difficulty),
                data=self._generate_data(),
                patch_level=self._generate_patch_level(difficulty),
                position=(self.rng.uniform(0, 800), self.rng.uniform(0, 600)),
            ))
        return nodes

    def _generate_ports(self, node_type: NodeType, difficulty: Difficulty) -> List[NetworkPort]:
        """Draw 3-7 distinct ports from the type's candidate list"""
        candidates = node_type.candidate_ports
        port_count = min(
            len(candidates),
            self.rng.randint(self.config.min_ports, self.config.max_ports)
        )

        ports = []
        for number in self.rng.sample(candidates, port_count):
            is_open = self.rng.random() < self.config.port_open_probability
            port = NetworkPort(
                number=number,
                service=get_service_name(number),
                status=PortStatus.OPEN if is_open else PortStatus.CLOSED,
                banner=self._generate_banner(number),
            )
            if is_open and self.rng.random() < difficulty.vulnerability_probability:
                port.vulnerability = self._create_vulnerability(difficulty)
            ports.append(port)
        return ports

    def _generate_banner(self, port: int) -> str:
        banners = SERVICE_BANNERS.get(port)
        if banners:
            return self.rng.choice(banners)
        return f"Service on port {port}"

    def _create_vulnerability(self, difficulty: Difficulty) -> Vulnerability:
        """Create a random vulnerability scaled to the difficulty"""
        vuln_type = self.rng.choice(list(VulnerabilityType))
        severity = self.rng.choice(list(Severity))
        self.vulnerability_counter += 1

        return Vulnerability(
            id=f"VULN-{self.vulnerability_counter:04d}",
            vuln_type=vuln_type,
            severity=severity,
            cve=f"CVE-2023-{self.rng.randint(0, 9999):04d}",
            description=f"{severity.value} {vuln_type.summary}",
            exploit_difficulty=5 + difficulty.exploit_modifier + self.rng.randint(0, 2),
            patchable=self.rng.random() < self.config.patchable_probability,
        )

    def _generate_security(self, node_type: NodeType, difficulty: Difficulty) -> SecurityLevel:
        """Sample a posture around the difficulty baseline"""
        encryption, monitoring = difficulty.security_baseline
        variation = self.rng.randint(-10, 9)

        auth_index = (
            self.rng.randint(0, 1) + node_type.auth_modifier + difficulty.auth_modifier - 1
        )

        return SecurityLevel(
            encryption=clamp(encryption + variation),
            authentication=AuthLevel.from_index(auth_index),
            monitoring=clamp(monitoring + variation),
            firewall=node_type == NodeType.FIREWALL or self.rng.random() < 0.4,
            ids=difficulty.has_ids and self.rng.random() < 0.5,
            honeypots=self.rng.randint(0, 2),
        )

    def _generate_patch_level(self, difficulty: Difficulty) -> int:
        return clamp(difficulty.patch_baseline + self.rng.randint(-10, 9))

    def _generate_data(self) -> List[NetworkData]:
        records = []
        for _ in range(self.rng.randint(1, 5)):
            data_type = self.rng.choice(list(DataType))
            base = data_type.base_value
            records.append(NetworkData(
                id=make_id("data", self.rng),
                data_type=data_type,
                value=base + self.rng.randint(0, base // 2),
                size=self.rng.randint(10, 1009),
                encrypted=self.rng.random() < 0.6,
                sensitivity=data_type.sensitivity,
                description=data_type.description,
            ))
        return records

    # =========================================================================
    # Phase 2: Connections
    # =========================================================================

    def _generate_connections(self, network: NetworkMap):
        """Chain every node first so the graph is connected, then add extras"""
        node_ids = network.node_order()

        for current_id, next_id in zip(node_ids, node_ids[1:]):
            network.nodes[current_id].connect(network.nodes[next_id])

        if len(node_ids) < 2:
            return

        extra = int(len(node_ids) * self.config.extra_connection_ratio)
        for _ in range(extra):
            a, b = self.rng.choice(node_ids), self.rng.choice(node_ids)
            network.nodes[a].connect(network.nodes[b])

    # =========================================================================
    # Phase 3: Subnets
    # =========================================================================

    def _generate_subnets(self, network: NetworkMap) -> List[NetworkSubnet]:
        """Partition nodes into contiguous subnets and address them"""
        node_ids = network.node_order()
        subnet_count = min(len(node_ids), max(2, len(node_ids) // 4))
        per_subnet = len(node_ids) // subnet_count

        subnets = []
        for i in range(subnet_count):
            start = i * per_subnet
            end = len(node_ids) if i == subnet_count - 1 else start + per_subnet
            member_ids = node_ids[start:end]
            octet = i + 1

            hosts = self.rng.sample(range(1, 255), len(member_ids))
            for node_id, host in zip(member_ids, hosts):
                network.nodes[node_id].address = f"192.168.{octet}.{host}"

            subnets.append(NetworkSubnet(
                id=f"subnet_{i}",
                name=f"Subnet_{i + 1}",
                cidr=f"192.168.{octet}.0/24",
                node_ids=member_ids,
                security=self._generate_security(NodeType.SERVER, network.difficulty),
                isolated=self.rng.random() < self.config.subnet_isolation_probability,
            ))
        return subnets

    # =========================================================================
    # Phase 4: Trap Placement
    # =========================================================================

    def _place_honeypots(self, network: NetworkMap):
        """
        Re-type a fraction of the non-honeypot nodes as honeypot traps.
        Traps keep their id, address, ports and edges; only their type,
        name and monitoring change.
        """
        trap_count = int(network.node_count * self.config.honeypot_ratio)
        candidates = [n.id for n in network.nodes.values() if not n.is_honeypot]
        trap_count = min(trap_count, len(candidates))

        for node_id in self.rng.sample(candidates, trap_count):
            node = network.nodes[node_id]
            network.nodes[node_id] = dataclasses.replace(
                node,
                node_type=NodeType.HONEYPOT,
                name=f"Honeypot_{node.name}",
                security=dataclasses.replace(node.security, monitoring=100, ids=True),
            )


# =============================================================================
# Convenience function
# =============================================================================

def generate_network(
    difficulty: Union[Difficulty, str] = Difficulty.MEDIUM,
    node_count: int = 10,
    seed: Optional[int] = None
) -> NetworkMap:
    """
    Convenience function to generate a network.

    Args:
        difficulty: Difficulty tag
        node_count: Number of nodes
        seed: Random seed for reproducibility

    Returns:
        A freshly generated NetworkMap
    """
    generator = NetworkTopologyGenerator(rng=random.Random(seed))
    return generator.generate(difficulty, node_count)
