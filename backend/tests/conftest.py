"""
Shared fixtures: a controllable clock, seeded simulators and a small
hand-built network whose node types are known in advance.
"""

import pytest

from netsim.core import (
    NetworkSimulator, NetworkMap, NetworkNode, NetworkPort, NetworkSubnet,
    Vulnerability, SimulationConfig, NodeType, PortStatus, VulnerabilityType,
    Severity, Difficulty
)


class FakeClock:
    """Clock returning a fixed time until advanced"""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def build_network(network_id: str = "net_test") -> NetworkMap:
    """
    Four nodes chained n0 - n1 - n2 - n3:
    n0 workstation, n1 server, n2 database, n3 admin_panel.
    n1 has one patchable and one unpatchable vulnerability.
    """
    types = [NodeType.WORKSTATION, NodeType.SERVER, NodeType.DATABASE, NodeType.ADMIN_PANEL]
    nodes = {}
    for i, node_type in enumerate(types):
        nodes[f"n{i}"] = NetworkNode(
            id=f"n{i}",
            node_type=node_type,
            address=f"10.0.0.{i + 1}",
            ports=[NetworkPort(number=22, service="SSH", status=PortStatus.OPEN)],
            patch_level=50,
        )
    for a, b in [("n0", "n1"), ("n1", "n2"), ("n2", "n3")]:
        nodes[a].connect(nodes[b])

    nodes["n1"].ports = [
        NetworkPort(80, "HTTP", PortStatus.OPEN, Vulnerability(
            "VULN-A", VulnerabilityType.SQL_INJECTION, Severity.HIGH,
            "CVE-2023-0001", "high SQL injection", 5, patchable=True,
        )),
        NetworkPort(443, "HTTPS", PortStatus.OPEN, Vulnerability(
            "VULN-B", VulnerabilityType.RCE, Severity.CRITICAL,
            "CVE-2023-0002", "critical RCE", 7, patchable=False,
        )),
    ]

    return NetworkMap(
        id=network_id,
        name="TestNet",
        difficulty=Difficulty.MEDIUM,
        nodes=nodes,
        subnets=[
            NetworkSubnet("subnet_0", "Subnet_1", "10.0.0.0/24", ["n0", "n1"]),
            NetworkSubnet("subnet_1", "Subnet_2", "10.0.1.0/24", ["n2", "n3"]),
        ],
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config():
    return SimulationConfig(seed=1234)


@pytest.fixture
def simulator(config, clock):
    return NetworkSimulator(config=config, clock=clock)


@pytest.fixture
def test_network(simulator):
    """The hand-built network, stored in the simulator"""
    return simulator.store.add(build_network())
