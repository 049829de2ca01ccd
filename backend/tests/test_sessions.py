"""
Session Manager Tests

Command recording, traceback events and the traceback risk formula.
"""

import pytest

from netsim.core import (
    SessionCommand, SimulationConfig, NetworkSimulator,
    NotFoundError, InvalidArgumentError
)

from conftest import build_network


def command(clock, text="scan", node_id="n0", success=True, suspicion=0):
    return SessionCommand(
        command=text,
        timestamp=clock(),
        node_id=node_id,
        success=success,
        suspicion_generated=suspicion,
        time_spent=1.5,
    )


# =============================================================================
# Starting Sessions
# =============================================================================

def test_start_session_binds_to_network(simulator, test_network, clock):
    session = simulator.start_session(test_network.id, "player-1")

    assert session.network_id == test_network.id
    assert session.player_id == "player-1"
    assert session.start_time == clock.now
    assert session.origin_address == "127.0.0.1"
    assert session.traceback_risk == 0
    assert simulator.get_session(session.id) is session


def test_start_session_on_unknown_network_fails(simulator):
    with pytest.raises(NotFoundError):
        simulator.start_session("network_missing", "player-1")


def test_unknown_session_fails_for_every_operation(simulator, clock):
    with pytest.raises(NotFoundError):
        simulator.get_session("nope")
    with pytest.raises(NotFoundError):
        simulator.record_command("nope", command(clock))
    with pytest.raises(NotFoundError):
        simulator.calculate_traceback_risk("nope")
    with pytest.raises(NotFoundError):
        simulator.compromise_node("nope", "n0")


# =============================================================================
# Recording Commands
# =============================================================================

def test_ten_suspicious_commands_push_risk_past_fifty(simulator, test_network, clock):
    session = simulator.start_session(test_network.id, "player-1")
    for _ in range(10):
        simulator.record_command(session.id, command(clock, suspicion=5))

    assert session.suspicion_level == 50
    risk = simulator.calculate_traceback_risk(session.id)
    assert risk >= 50
    assert risk == 70  # 10 commands * 2 + 50 suspicion
    assert session.traceback_risk == risk


def test_record_command_appends_traceback_event(simulator, test_network, clock):
    session = simulator.start_session(test_network.id, "player-1", origin_address="203.0.113.9")
    event = simulator.record_command(session.id, command(clock, "sqlmap", "n1", suspicion=8))

    assert test_network.traceback_events == [event]
    assert event.source_address == "203.0.113.9"
    assert event.target_node == "n1"
    assert event.action == "sqlmap"
    assert event.suspicion_generated == 8
    assert not event.detected
    assert event.evidence == ()
    assert test_network.nodes["n1"].last_accessed == clock.now


def test_detection_threshold_is_strictly_above_twenty(simulator, test_network, clock):
    session = simulator.start_session(test_network.id, "player-1")
    at_threshold = simulator.record_command(session.id, command(clock, suspicion=20))
    above = simulator.record_command(session.id, command(clock, suspicion=21))

    assert not at_threshold.detected
    assert above.detected


def test_failed_commands_carry_evidence_and_weigh_ten(simulator, test_network, clock):
    session = simulator.start_session(test_network.id, "player-1")
    event = simulator.record_command(session.id, command(clock, success=False))

    assert event.evidence == ("failed_authentication", "unusual_activity")
    assert session.failed_commands == 1
    assert simulator.calculate_traceback_risk(session.id) == 2 + 10


def test_negative_suspicion_is_rejected(simulator, test_network, clock):
    session = simulator.start_session(test_network.id, "player-1")
    with pytest.raises(InvalidArgumentError):
        simulator.record_command(session.id, command(clock, suspicion=-5))
    assert session.total_commands == 0


def test_command_on_unknown_node_is_rejected(simulator, test_network, clock):
    session = simulator.start_session(test_network.id, "player-1")
    with pytest.raises(NotFoundError):
        simulator.record_command(session.id, command(clock, node_id="n99"))
    assert session.command_history == []
    assert test_network.traceback_events == []


def test_command_without_node_is_allowed(simulator, test_network, clock):
    session = simulator.start_session(test_network.id, "player-1")
    event = simulator.record_command(session.id, command(clock, text="help", node_id=""))
    assert event.target_node == ""


# =============================================================================
# Traceback Risk
# =============================================================================

def test_risk_is_stable_without_new_input(simulator, test_network, clock):
    session = simulator.start_session(test_network.id, "player-1")
    for suspicion in (3, 12, 30):
        simulator.record_command(session.id, command(clock, suspicion=suspicion))

    first = simulator.calculate_traceback_risk(session.id)
    second = simulator.calculate_traceback_risk(session.id)
    assert first == second


def test_elapsed_minutes_add_five_each(simulator, test_network, clock):
    session = simulator.start_session(test_network.id, "player-1")
    clock.advance(59)
    assert simulator.calculate_traceback_risk(session.id) == 0
    clock.advance(61)
    assert simulator.calculate_traceback_risk(session.id) == 10


def test_compromised_high_value_nodes_add_twenty(simulator, test_network):
    session = simulator.start_session(test_network.id, "player-1")

    simulator.compromise_node(session.id, "n0")  # workstation
    assert simulator.calculate_traceback_risk(session.id) == 0

    simulator.compromise_node(session.id, "n2")  # database
    simulator.compromise_node(session.id, "n3")  # admin panel
    assert simulator.calculate_traceback_risk(session.id) == 40
    assert session.compromised_nodes == ["n0", "n2", "n3"]
    assert test_network.nodes["n2"].compromised


def test_risk_is_capped_at_one_hundred(simulator, test_network, clock):
    session = simulator.start_session(test_network.id, "player-1")
    for _ in range(5):
        simulator.record_command(session.id, command(clock, success=False, suspicion=40))
    clock.advance(3600)

    assert simulator.calculate_traceback_risk(session.id) == 100
    assert session.traceback_risk == 100


# =============================================================================
# Progress Tracking and History
# =============================================================================

def test_compromise_implies_discovery(simulator, test_network):
    session = simulator.start_session(test_network.id, "player-1")
    simulator.discover_node(session.id, "n1")
    simulator.compromise_node(session.id, "n1")
    simulator.compromise_node(session.id, "n1")

    assert session.discovered_nodes == ["n1"]
    assert session.compromised_nodes == ["n1"]


def test_set_current_node_validates_node(simulator, test_network):
    session = simulator.start_session(test_network.id, "player-1")
    simulator.set_current_node(session.id, "n2")
    assert session.current_node == "n2"
    with pytest.raises(NotFoundError):
        simulator.set_current_node(session.id, "n42")


def test_history_is_capped_but_counters_are_exact(clock):
    config = SimulationConfig(seed=5, max_command_history=5, max_traceback_events=3)
    simulator = NetworkSimulator(config=config, clock=clock)
    network = simulator.store.add(build_network())
    session = simulator.start_session(network.id, "player-1")

    for i in range(8):
        simulator.record_command(session.id, command(clock, text=f"cmd{i}", success=i % 2 == 0))

    assert [c.command for c in session.command_history] == [f"cmd{i}" for i in range(3, 8)]
    assert session.total_commands == 8
    assert session.failed_commands == 4
    assert len(network.traceback_events) == 3
    assert simulator.calculate_traceback_risk(session.id) == 8 * 2 + 4 * 10


def test_session_id_does_not_embed_player_text(simulator, test_network):
    session = simulator.start_session(test_network.id, "red/team 1")
    assert session.id.startswith("session_")
    assert "/" not in session.id
    assert session.player_id == "red/team 1"


def test_end_session_removes_it(simulator, test_network):
    session = simulator.start_session(test_network.id, "player-1")
    simulator.end_session(session.id)
    with pytest.raises(NotFoundError):
        simulator.get_session(session.id)
