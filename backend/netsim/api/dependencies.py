"""
Shared FastAPI dependencies.
"""

from fastapi import Request

from ..core import NetworkSimulator


def get_simulator(request: Request) -> NetworkSimulator:
    """The mission's simulator, created on first use if startup did not run"""
    simulator = getattr(request.app.state, "simulator", None)
    if simulator is None:
        simulator = request.app.state.simulator = NetworkSimulator()
    return simulator
