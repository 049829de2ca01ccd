"""
Topology Generator Tests

Connectivity, subnet partition, port and security bounds, trap placement
and argument validation of the network generator.
"""

import ipaddress
import random

import pytest

from netsim.core import (
    NetworkTopologyGenerator, SimulationConfig, Difficulty, NodeType,
    PortStatus, InvalidArgumentError, generate_network
)


DIFFICULTIES = list(Difficulty)


def make_generator(seed: int) -> NetworkTopologyGenerator:
    return NetworkTopologyGenerator(SimulationConfig(), random.Random(seed))


# =============================================================================
# Scenario Tests
# =============================================================================

def test_easy_five_node_network():
    """generate('easy', 5) gives 5 nodes with 3-7 ports, >= 2 subnets, connected"""
    network = make_generator(7).generate("easy", 5)

    assert network.node_count == 5
    assert network.difficulty == Difficulty.EASY
    for node in network.nodes.values():
        assert 3 <= len(node.ports) <= 7
    assert len(network.subnets) >= 2
    assert network.is_connected()


@pytest.mark.parametrize("difficulty", DIFFICULTIES)
@pytest.mark.parametrize("node_count", [2, 3, 5, 10, 17, 40])
def test_generated_networks_are_connected_and_symmetric(difficulty, node_count):
    for seed in range(5):
        network = make_generator(seed).generate(difficulty, node_count)
        assert network.is_connected()
        assert network.is_symmetric()
        for node in network.nodes.values():
            assert node.id not in node.connections
            assert len(node.connections) == len(set(node.connections))


@pytest.mark.parametrize("node_count", [1, 2, 4, 9, 25, 101])
def test_subnets_partition_all_nodes(node_count):
    network = make_generator(node_count).generate(Difficulty.MEDIUM, node_count)

    assigned = [node_id for subnet in network.subnets for node_id in subnet.node_ids]
    assert sorted(assigned) == sorted(network.nodes)
    assert len(assigned) == len(set(assigned))
    assert network.subnets_partition_nodes()


def test_single_node_network():
    network = make_generator(3).generate(Difficulty.HARD, 1)

    assert network.node_count == 1
    assert len(network.subnets) == 1
    assert network.is_connected()
    assert network.nodes["node_0"].connections == []


# =============================================================================
# Node Contents
# =============================================================================

def test_ports_are_distinct_and_from_candidate_list():
    network = make_generator(11).generate(Difficulty.MEDIUM, 30)

    for node in network.nodes.values():
        numbers = [p.number for p in node.ports]
        assert len(numbers) == len(set(numbers))
        for port in node.ports:
            assert port.status in (PortStatus.OPEN, PortStatus.CLOSED)
            if port.vulnerability is not None:
                assert port.is_open
                assert 1 <= port.vulnerability.exploit_difficulty <= 10
                assert port.vulnerability.cve.startswith("CVE-2023-")


def test_addresses_are_unique_and_inside_subnet_cidr():
    network = make_generator(5).generate(Difficulty.EXPERT, 40)

    addresses = [n.address for n in network.nodes.values()]
    assert len(addresses) == len(set(addresses))
    for subnet in network.subnets:
        cidr = ipaddress.ip_network(subnet.cidr)
        for node_id in subnet.node_ids:
            assert ipaddress.ip_address(network.nodes[node_id].address) in cidr


@pytest.mark.parametrize("difficulty", DIFFICULTIES)
def test_security_and_patch_levels_are_bounded(difficulty):
    network = make_generator(21).generate(difficulty, 50)

    for node in network.nodes.values():
        assert 0 <= node.security.encryption <= 100
        assert 0 <= node.security.monitoring <= 100
        assert 0 <= node.patch_level <= 100
        assert node.alert_level == 0
        assert 0 <= node.security.honeypots <= 2
        assert 1 <= len(node.data) <= 5
    for subnet in network.subnets:
        assert 0 <= subnet.security.encryption <= 100


def test_firewall_nodes_always_have_firewall():
    network = make_generator(8).generate(Difficulty.MEDIUM, 80)

    for node in network.get_nodes_by_type(NodeType.FIREWALL):
        assert node.security.firewall


def test_easy_networks_run_no_ids_outside_traps():
    network = make_generator(9).generate(Difficulty.EASY, 60)

    for node in network.nodes.values():
        if not node.name.startswith("Honeypot_"):
            assert not node.security.ids


def test_easier_difficulty_has_more_vulnerabilities():
    def vulnerable_ratio(difficulty):
        open_ports = vulnerable = 0
        for seed in range(10):
            network = make_generator(seed).generate(difficulty, 40)
            for node in network.nodes.values():
                open_ports += len(node.open_ports)
                vulnerable += len(node.vulnerabilities)
        return vulnerable / open_ports

    assert vulnerable_ratio(Difficulty.EASY) > vulnerable_ratio(Difficulty.EXPERT)


# =============================================================================
# Trap Placement
# =============================================================================

def test_trap_placement_converts_a_tenth_of_nodes():
    network = make_generator(13).generate(Difficulty.MEDIUM, 50)

    traps = [n for n in network.nodes.values() if n.name.startswith("Honeypot_")]
    assert len(traps) == 5
    for trap in traps:
        assert trap.node_type == NodeType.HONEYPOT
        assert trap.security.monitoring == 100
        assert trap.security.ids
    # Traps stay wired into the graph
    assert network.is_connected()
    assert network.is_symmetric()


def test_all_node_types_appear_over_many_generations():
    seen = set()
    for seed in range(30):
        network = make_generator(seed).generate(Difficulty.MEDIUM, 20)
        seen.update(n.node_type for n in network.nodes.values())
    assert seen == set(NodeType)


# =============================================================================
# Determinism and Validation
# =============================================================================

def test_same_seed_reproduces_network():
    first = generate_network(Difficulty.HARD, 15, seed=99)
    second = generate_network(Difficulty.HARD, 15, seed=99)
    assert first.to_dict() == second.to_dict()


@pytest.mark.parametrize("bad_count", [0, -1, -50])
def test_non_positive_node_count_is_rejected(bad_count):
    with pytest.raises(InvalidArgumentError):
        make_generator(1).generate(Difficulty.EASY, bad_count)


def test_oversized_node_count_is_rejected():
    generator = NetworkTopologyGenerator(SimulationConfig(max_nodes=20), random.Random(1))
    with pytest.raises(InvalidArgumentError):
        generator.generate(Difficulty.EASY, 21)


def test_unknown_difficulty_is_rejected():
    with pytest.raises(InvalidArgumentError):
        make_generator(1).generate("nightmare", 5)


def test_difficulty_strings_are_case_insensitive():
    network = make_generator(2).generate("EXPERT", 4)
    assert network.difficulty == Difficulty.EXPERT
