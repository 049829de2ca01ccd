"""
Session Routes

REST API endpoints for hacking sessions:
- Start/get/end sessions
- Record commands
- Traceback risk
- Node compromise
"""

from fastapi import APIRouter, Body, Depends, Path
from pydantic import BaseModel, Field
from typing import Dict, Optional, Any

from ...core import NetworkSimulator, SessionCommand
from ..dependencies import get_simulator

router = APIRouter()


# =============================================================================
# Pydantic Models for Request/Response
# =============================================================================

class StartSessionRequest(BaseModel):
    """Request model for opening a session"""
    network_id: str = Field(..., description="Target network ID")
    player_id: str = Field(..., description="Player starting the session")
    origin_address: Optional[str] = Field(default=None, description="Address the player connects from")


class CommandRequest(BaseModel):
    """Request model for recording a command"""
    command: str = Field(..., description="Command text as typed by the player")
    node_id: str = Field(default="", description="Node the command acted on")
    success: bool = True
    suspicion_generated: int = Field(default=0, description="Suspicion this command adds")
    time_spent: float = 0.0
    timestamp: Optional[float] = Field(default=None, description="Defaults to the server clock")

    class Config:
        json_schema_extra = {
            "example": {
                "command": "nmap -sV node_0",
                "node_id": "node_0",
                "success": True,
                "suspicion_generated": 5
            }
        }


class CompromiseRequest(BaseModel):
    node_id: str


class RiskResponse(BaseModel):
    session_id: str
    traceback_risk: int
    suspicion_level: int
    total_commands: int


# =============================================================================
# API Endpoints
# =============================================================================

@router.post("/", response_model=Dict[str, Any])
async def start_session(
    request: StartSessionRequest,
    simulator: NetworkSimulator = Depends(get_simulator)
):
    """
    Start a hacking session against an existing network.
    """
    session = simulator.start_session(request.network_id, request.player_id, request.origin_address)
    return session.to_dict()


@router.get("/{session_id}", response_model=Dict[str, Any])
async def get_session(
    session_id: str = Path(..., description="Session ID"),
    simulator: NetworkSimulator = Depends(get_simulator)
):
    return simulator.get_session(session_id).to_dict()


@router.post("/{session_id}/commands", response_model=Dict[str, Any])
async def record_command(
    session_id: str = Path(..., description="Session ID"),
    request: CommandRequest = Body(...),
    simulator: NetworkSimulator = Depends(get_simulator)
):
    """
    Record a command in the session.

    Returns the traceback event it produced and the refreshed risk.
    """
    command = SessionCommand(
        command=request.command,
        timestamp=request.timestamp if request.timestamp is not None else simulator.clock(),
        node_id=request.node_id,
        success=request.success,
        suspicion_generated=request.suspicion_generated,
        time_spent=request.time_spent,
    )
    event = simulator.record_command(session_id, command)
    session = simulator.get_session(session_id)
    return {
        "event": event.to_dict(),
        "traceback_risk": session.traceback_risk,
        "suspicion_level": session.suspicion_level,
    }


@router.get("/{session_id}/risk", response_model=RiskResponse)
async def get_traceback_risk(
    session_id: str = Path(..., description="Session ID"),
    simulator: NetworkSimulator = Depends(get_simulator)
):
    """
    Current traceback risk of the session.
    """
    session = simulator.get_session(session_id)
    return RiskResponse(
        session_id=session_id,
        traceback_risk=simulator.calculate_traceback_risk(session_id),
        suspicion_level=session.suspicion_level,
        total_commands=session.total_commands,
    )


@router.post("/{session_id}/compromise", response_model=Dict[str, Any])
async def compromise_node(
    session_id: str = Path(..., description="Session ID"),
    request: CompromiseRequest = Body(...),
    simulator: NetworkSimulator = Depends(get_simulator)
):
    """
    Mark a node of the session's network as compromised.
    """
    return simulator.compromise_node(session_id, request.node_id).to_dict()


@router.delete("/{session_id}")
async def end_session(
    session_id: str = Path(..., description="Session ID"),
    simulator: NetworkSimulator = Depends(get_simulator)
):
    """
    End a session.
    """
    simulator.end_session(session_id)
    return {"message": "Session ended", "session_id": session_id}
