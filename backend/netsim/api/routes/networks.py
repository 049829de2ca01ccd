"""
Network Routes

REST API endpoints for generated networks:
- Generate/list/get networks
- Matrix export for visualisation
- Defense ticks
- Backdoor installation
"""

from fastapi import APIRouter, Body, Depends, Path
from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Any
from enum import Enum

from ...core import NetworkSimulator, NetworkMap
from ..dependencies import get_simulator

router = APIRouter()


# =============================================================================
# Pydantic Models for Request/Response
# =============================================================================

class DifficultyLevel(str, Enum):
    """Difficulty levels for API"""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"


class CreateNetworkRequest(BaseModel):
    """Request model for generating a network"""
    difficulty: DifficultyLevel = DifficultyLevel.MEDIUM
    node_count: int = Field(default=10, description="Number of nodes to generate")

    class Config:
        json_schema_extra = {
            "example": {
                "difficulty": "easy",
                "node_count": 8
            }
        }


class InstallBackdoorRequest(BaseModel):
    """Request model for installing a backdoor"""
    backdoor_type: str = Field(..., description="shell, tunnel, keylogger, data_exfil or persistence")
    session_id: Optional[str] = Field(default=None, description="Session to credit the backdoor to")


class NetworkSummary(BaseModel):
    """Response model for a network listing entry"""
    id: str
    name: str
    difficulty: str
    node_count: int
    subnet_count: int
    global_alert_level: int
    compromised_count: int


class MatrixResponse(BaseModel):
    """Response model for the numeric export of a network"""
    node_ids: List[str]
    adjacency: List[List[int]]
    features: List[List[float]]


def network_to_summary(network: NetworkMap) -> NetworkSummary:
    return NetworkSummary(
        id=network.id,
        name=network.name,
        difficulty=network.difficulty.value,
        node_count=network.node_count,
        subnet_count=len(network.subnets),
        global_alert_level=network.global_alert_level,
        compromised_count=len(network.compromised_nodes),
    )


# =============================================================================
# API Endpoints
# =============================================================================

@router.post("/", response_model=Dict[str, Any])
async def create_network(
    request: CreateNetworkRequest,
    simulator: NetworkSimulator = Depends(get_simulator)
):
    """
    Generate a new network.

    Returns the full network map.
    """
    network = simulator.generate_network(request.difficulty.value, request.node_count)
    return network.to_dict()


@router.get("/", response_model=List[NetworkSummary])
async def list_networks(simulator: NetworkSimulator = Depends(get_simulator)):
    """
    List all generated networks.
    """
    return [network_to_summary(n) for n in simulator.get_all_networks()]


@router.get("/{network_id}", response_model=Dict[str, Any])
async def get_network(
    network_id: str = Path(..., description="Network ID"),
    simulator: NetworkSimulator = Depends(get_simulator)
):
    """
    Get the full state of a network.
    """
    return simulator.get_network(network_id).to_dict()


@router.get("/{network_id}/matrix", response_model=MatrixResponse)
async def get_network_matrix(
    network_id: str = Path(..., description="Network ID"),
    simulator: NetworkSimulator = Depends(get_simulator)
):
    """
    Adjacency and per-node feature matrices, rows in node_ids order.
    """
    network = simulator.get_network(network_id)
    return MatrixResponse(
        node_ids=network.node_order(),
        adjacency=network.adjacency_matrix().tolist(),
        features=network.feature_matrix().tolist(),
    )


@router.post("/{network_id}/defense-tick", response_model=Dict[str, Any])
async def run_defense_tick(
    network_id: str = Path(..., description="Network ID"),
    simulator: NetworkSimulator = Depends(get_simulator)
):
    """
    Run one autonomous defense tick.

    Returns what the tick patched and discovered.
    """
    return simulator.simulate_ai_defense(network_id).to_dict()


@router.post("/{network_id}/nodes/{node_id}/backdoors", response_model=Dict[str, Any])
async def install_backdoor(
    network_id: str = Path(..., description="Network ID"),
    node_id: str = Path(..., description="Node ID"),
    request: InstallBackdoorRequest = Body(...),
    simulator: NetworkSimulator = Depends(get_simulator)
):
    """
    Install a backdoor on a compromised node.
    """
    backdoor = simulator.install_backdoor(
        network_id, node_id, request.backdoor_type, session_id=request.session_id
    )
    return backdoor.to_dict()
