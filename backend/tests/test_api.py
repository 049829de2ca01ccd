"""
API Tests

Tests for the FastAPI endpoints:
- Networks CRUD and matrix export
- Sessions, commands and traceback risk
- Backdoors and defense ticks
- Error responses
"""

from fastapi.testclient import TestClient

from netsim.api.main import app
from netsim.core import NetworkSimulator, SimulationConfig

from conftest import FakeClock


# =============================================================================
# Test Client
# =============================================================================

client = TestClient(app)


def create_network(difficulty: str = "easy", node_count: int = 6) -> dict:
    response = client.post("/api/networks/", json={
        "difficulty": difficulty,
        "node_count": node_count
    })
    assert response.status_code == 200
    return response.json()


def start_session(network_id: str) -> dict:
    response = client.post("/api/sessions/", json={
        "network_id": network_id,
        "player_id": "player-1"
    })
    assert response.status_code == 200
    return response.json()


# =============================================================================
# Root Endpoint Tests
# =============================================================================

def test_root_endpoint():
    """Test root endpoint returns welcome message"""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert "message" in data
    assert "Network Simulator" in data["message"]
    print("✓ Root endpoint works")


def test_health_check():
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    print("✓ Health check works")


# =============================================================================
# Network Endpoint Tests
# =============================================================================

def test_create_network():
    """Test generating a new network"""
    data = create_network("easy", 5)

    assert data["difficulty"] == "easy"
    assert len(data["nodes"]) == 5
    assert len(data["subnets"]) >= 2
    for node in data["nodes"].values():
        assert 3 <= len(node["ports"]) <= 7
    print(f"✓ Network created with ID: {data['id']}")


def test_list_networks():
    """Test listing networks"""
    network = create_network()

    response = client.get("/api/networks/")
    assert response.status_code == 200
    summaries = {n["id"]: n for n in response.json()}
    assert network["id"] in summaries
    assert summaries[network["id"]]["node_count"] == 6
    print(f"✓ Listed {len(summaries)} networks")


def test_get_network():
    """Test getting a specific network"""
    network = create_network("hard", 7)

    response = client.get(f"/api/networks/{network['id']}")
    assert response.status_code == 200
    assert response.json() == network
    print("✓ Get network works")


def test_get_nonexistent_network():
    """Test getting a network that doesn't exist"""
    response = client.get("/api/networks/nonexistent-id")
    assert response.status_code == 404
    data = response.json()
    assert data["status_code"] == 404
    assert data["error"] == "Network not found: nonexistent-id"
    print("✓ Nonexistent network returns 404")


def test_invalid_node_count():
    """Test that a non-positive node count is rejected"""
    response = client.post("/api/networks/", json={"difficulty": "easy", "node_count": 0})
    assert response.status_code == 400
    assert response.json()["status_code"] == 400
    print("✓ Invalid node count returns 400")


def test_network_matrix():
    """Test the numeric export of a network"""
    network = create_network("medium", 8)

    response = client.get(f"/api/networks/{network['id']}/matrix")
    assert response.status_code == 200
    data = response.json()
    assert len(data["node_ids"]) == 8
    assert len(data["adjacency"]) == 8
    assert all(len(row) == 9 for row in data["features"])
    for i in range(8):
        assert data["adjacency"][i][i] == 0
        for j in range(8):
            assert data["adjacency"][i][j] == data["adjacency"][j][i]
    print("✓ Matrix export works")


def test_defense_tick():
    """Test running a defense tick"""
    network = create_network()

    response = client.post(f"/api/networks/{network['id']}/defense-tick")
    assert response.status_code == 200
    data = response.json()
    assert data["network_id"] == network["id"]
    assert 0 <= data["global_alert_level"] <= 100
    print("✓ Defense tick works")


# =============================================================================
# Session Endpoint Tests
# =============================================================================

def test_session_commands_and_risk():
    """Test recording commands and reading the traceback risk"""
    network = create_network()
    session = start_session(network["id"])
    node_id = next(iter(network["nodes"]))

    for _ in range(10):
        response = client.post(f"/api/sessions/{session['id']}/commands", json={
            "command": "nmap -sV",
            "node_id": node_id,
            "suspicion_generated": 5,
            "timestamp": session["start_time"]
        })
        assert response.status_code == 200

    data = response.json()
    assert data["suspicion_level"] == 50
    assert data["event"]["target_node"] == node_id
    assert not data["event"]["detected"]

    response = client.get(f"/api/sessions/{session['id']}/risk")
    assert response.status_code == 200
    risk = response.json()
    assert risk["total_commands"] == 10
    assert risk["traceback_risk"] >= 50

    events = client.get(f"/api/networks/{network['id']}").json()["traceback_events"]
    assert len(events) == 10
    print(f"✓ Traceback risk after 10 commands: {risk['traceback_risk']}")


def test_command_without_timestamp_uses_simulator_clock(monkeypatch):
    """Test that omitted timestamps come from the simulator clock"""
    clock = FakeClock()
    monkeypatch.setattr(
        app.state, "simulator",
        NetworkSimulator(config=SimulationConfig(seed=5), clock=clock),
        raising=False
    )
    network = create_network()
    session = start_session(network["id"])
    node_id = next(iter(network["nodes"]))
    clock.advance(90)

    response = client.post(f"/api/sessions/{session['id']}/commands", json={
        "command": "whoami",
        "node_id": node_id
    })
    assert response.status_code == 200
    assert session["start_time"] == clock.now - 90
    assert response.json()["event"]["timestamp"] == clock.now

    node = client.get(f"/api/networks/{network['id']}").json()["nodes"][node_id]
    assert node["last_accessed"] == clock.now
    print("✓ Command timestamps follow the simulator clock")


def test_command_with_negative_suspicion():
    """Test that negative suspicion is rejected"""
    network = create_network()
    session = start_session(network["id"])

    response = client.post(f"/api/sessions/{session['id']}/commands", json={
        "command": "ls",
        "suspicion_generated": -1
    })
    assert response.status_code == 400
    print("✓ Negative suspicion returns 400")


def test_session_on_unknown_network():
    """Test that sessions need an existing network"""
    response = client.post("/api/sessions/", json={
        "network_id": "nonexistent-id",
        "player_id": "player-1"
    })
    assert response.status_code == 404
    print("✓ Session on unknown network returns 404")


def test_end_session():
    """Test ending a session"""
    network = create_network()
    session = start_session(network["id"])

    response = client.delete(f"/api/sessions/{session['id']}")
    assert response.status_code == 200

    response = client.get(f"/api/sessions/{session['id']}")
    assert response.status_code == 404
    print("✓ End session works")


# =============================================================================
# Backdoor Endpoint Tests
# =============================================================================

def test_backdoor_requires_compromised_node():
    """Test installing a backdoor before and after compromising the node"""
    network = create_network()
    session = start_session(network["id"])
    node_id = next(iter(network["nodes"]))
    url = f"/api/networks/{network['id']}/nodes/{node_id}/backdoors"

    response = client.post(url, json={"backdoor_type": "shell", "session_id": session["id"]})
    assert response.status_code == 409
    assert "not compromised" in response.json()["error"]

    response = client.post(f"/api/sessions/{session['id']}/compromise", json={"node_id": node_id})
    assert response.status_code == 200
    assert node_id in response.json()["compromised_nodes"]

    response = client.post(url, json={"backdoor_type": "persistence", "session_id": session["id"]})
    assert response.status_code == 200
    backdoor = response.json()
    assert backdoor["active"]
    assert backdoor["discovery_risk"] == 10
    assert backdoor["trigger_condition"] == "system_reboot"

    data = client.get(f"/api/sessions/{session['id']}").json()
    assert data["active_backdoors"] == [backdoor["id"]]
    print("✓ Backdoor lifecycle works")


def test_unknown_backdoor_type():
    """Test that an unknown backdoor type is rejected"""
    network = create_network()
    session = start_session(network["id"])
    node_id = next(iter(network["nodes"]))
    client.post(f"/api/sessions/{session['id']}/compromise", json={"node_id": node_id})

    response = client.post(
        f"/api/networks/{network['id']}/nodes/{node_id}/backdoors",
        json={"backdoor_type": "rootkit"}
    )
    assert response.status_code == 400
    print("✓ Unknown backdoor type returns 400")


# =============================================================================
# Run Tests
# =============================================================================

if __name__ == "__main__":
    print("\n" + "=" * 60)
    print("Running API Tests")
    print("=" * 60 + "\n")

    test_root_endpoint()
    test_health_check()
    test_create_network()
    test_list_networks()
    test_get_network()
    test_get_nonexistent_network()
    test_invalid_node_count()
    test_network_matrix()
    test_defense_tick()
    test_session_commands_and_risk()
    test_command_with_negative_suspicion()
    test_session_on_unknown_network()
    test_end_session()
    test_backdoor_requires_compromised_node()
    test_unknown_backdoor_type()

    print("\n" + "=" * 60)
    print("All API tests passed! ✓")
    print("=" * 60)
