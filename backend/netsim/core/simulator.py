# =============================================================================
# Dynamic Network Simulator - Simulator
# =============================================================================
"""
Main entry point that ties the generator, store, sessions, backdoors and
defense tick together for one mission.
"""

import logging
import random
import threading
import time
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Callable, Dict, List, Optional, Union

from .enums import BackdoorType, Difficulty
from .errors import InvalidArgumentError
from .data_structures import Backdoor, HackingSession, SessionCommand, SimulationConfig, TracebackEvent
from .network_map import NetworkMap
from .network_store import NetworkStore
from .network_topology import NetworkTopologyGenerator
from .session_manager import SessionManager
from .backdoors import BackdoorManager
from .defense import DefenseReport, DefenseSimulator

logger = logging.getLogger(__name__)


class SimulationEventType(Enum):
    """Types of events that can be emitted by the simulator"""
    NETWORK_GENERATED = auto()
    SESSION_STARTED = auto()
    SESSION_ENDED = auto()
    COMMAND_RECORDED = auto()
    COMMAND_DETECTED = auto()
    NODE_COMPROMISED = auto()
    BACKDOOR_INSTALLED = auto()
    BACKDOOR_DISCOVERED = auto()
    DEFENSE_TICK = auto()


@dataclass
class SimulationEvent:
    """Represents a simulator event for logging and UI updates"""
    event_type: SimulationEventType
    network_id: Optional[str] = None
    session_id: Optional[str] = None
    message: str = ""
    data: dict = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)


class NetworkSimulator:
    """
    Owns every network and session of one mission.

    Responsibilities:
    - Generate and store networks
    - Run hacking sessions and traceback risk
    - Install backdoors
    - Run defense ticks
    - Emit events for UI/logging

    Mutations of a network (commands, backdoors, defense ticks) are
    serialised by a per-network lock.

    Example usage:
        sim = NetworkSimulator(seed=42)
        network = sim.generate_network("easy", 8)
        session = sim.start_session(network.id, "player-1")
        sim.record_command(session.id, SessionCommand("nmap", time.time(), "node_0"))
        sim.simulate_ai_defense(network.id)
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        seed: Optional[int] = None,
        clock: Callable[[], float] = time.time
    ):
        """Initialize the simulator with optional configuration, seed and clock"""
        self.config = config or SimulationConfig()
        if seed is not None:
            self.config = replace(self.config, seed=seed)
        self.clock = clock
        self.rng = random.Random(self.config.seed)

        self.store = NetworkStore()
        self.generator = NetworkTopologyGenerator(self.config, self.rng)
        self.sessions = SessionManager(self.store, self.config, clock)
        self.backdoors = BackdoorManager(self.store, self.config, clock)
        self.defense = DefenseSimulator(self.config, self.rng)

        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

        # Event system
        self.event_listeners: Dict[SimulationEventType, List[Callable]] = {}
        self.event_history: List[SimulationEvent] = []

    def _lock_for(self, network_id: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(network_id)
            if lock is None:
                lock = self._locks[network_id] = threading.RLock()
            return lock

    # =========================================================================
    # Networks
    # =========================================================================

    def generate_network(
        self,
        difficulty: Union[Difficulty, str] = Difficulty.MEDIUM,
        node_count: Optional[int] = None
    ) -> NetworkMap:
        """Generate a network and add it to the store"""
        network = self.generator.generate(difficulty, node_count)
        self.store.add(network)

        self._emit_event(SimulationEvent(
            event_type=SimulationEventType.NETWORK_GENERATED,
            network_id=network.id,
            message=f"Generated {network.name} ({network.difficulty.value}, {network.node_count} nodes)",
            data={"node_count": network.node_count, "difficulty": network.difficulty.value},
        ))
        return network

    def get_network(self, network_id: str) -> NetworkMap:
        return self.store.get(network_id)

    def get_all_networks(self) -> List[NetworkMap]:
        return self.store.get_all()

    def simulate_ai_defense(self, network_id: str) -> DefenseReport:
        """Run one defense tick on a stored network"""
        network = self.store.get(network_id)
        with self._lock_for(network_id):
            report = self.defense.tick(network)
            self.sessions.forget_backdoors(network_id, report.discovered_backdoors)

        for backdoor_id in report.discovered_backdoors:
            self._emit_event(SimulationEvent(
                event_type=SimulationEventType.BACKDOOR_DISCOVERED,
                network_id=network_id,
                message=f"Backdoor {backdoor_id} discovered",
                data={"backdoor_id": backdoor_id, "global_alert_level": report.global_alert_level},
            ))
        self._emit_event(SimulationEvent(
            event_type=SimulationEventType.DEFENSE_TICK,
            network_id=network_id,
            data=report.to_dict(),
        ))
        return report

    # =========================================================================
    # Backdoors
    # =========================================================================

    def install_backdoor(
        self,
        network_id: str,
        node_id: str,
        backdoor_type: Union[BackdoorType, str],
        session_id: Optional[str] = None
    ) -> Backdoor:
        """
        Install a backdoor on a compromised node, optionally crediting it to
        a session bound to the same network.
        """
        session = self.sessions.get_session(session_id) if session_id else None
        if session is not None and session.network_id != network_id:
            raise InvalidArgumentError(
                f"Session {session_id} is bound to network {session.network_id}, not {network_id}"
            )
        with self._lock_for(network_id):
            backdoor = self.backdoors.install_backdoor(network_id, node_id, backdoor_type)
            if session is not None:
                session.active_backdoors.append(backdoor.id)

        self._emit_event(SimulationEvent(
            event_type=SimulationEventType.BACKDOOR_INSTALLED,
            network_id=network_id,
            session_id=session_id,
            message=f"{backdoor.backdoor_type.value} backdoor installed on {node_id}",
            data={"backdoor_id": backdoor.id, "node_id": node_id},
        ))
        return backdoor

    # =========================================================================
    # Sessions
    # =========================================================================

    def start_session(
        self,
        network_id: str,
        player_id: str,
        origin_address: Optional[str] = None
    ) -> HackingSession:
        session = self.sessions.start_session(network_id, player_id, origin_address)
        self._emit_event(SimulationEvent(
            event_type=SimulationEventType.SESSION_STARTED,
            network_id=network_id,
            session_id=session.id,
            message=f"Session started by {player_id}",
        ))
        return session

    def get_session(self, session_id: str) -> HackingSession:
        return self.sessions.get_session(session_id)

    def end_session(self, session_id: str) -> HackingSession:
        session = self.sessions.end_session(session_id)
        self._emit_event(SimulationEvent(
            event_type=SimulationEventType.SESSION_ENDED,
            network_id=session.network_id,
            session_id=session_id,
        ))
        return session

    def record_command(self, session_id: str, command: SessionCommand) -> TracebackEvent:
        session = self.sessions.get_session(session_id)
        with self._lock_for(session.network_id):
            event = self.sessions.record_command(session_id, command)

        self._emit_event(SimulationEvent(
            event_type=(
                SimulationEventType.COMMAND_DETECTED if event.detected
                else SimulationEventType.COMMAND_RECORDED
            ),
            network_id=session.network_id,
            session_id=session_id,
            message=command.command,
            data={"traceback_risk": session.traceback_risk, "suspicion": session.suspicion_level},
        ))
        return event

    def calculate_traceback_risk(self, session_id: str) -> int:
        return self.sessions.calculate_traceback_risk(session_id)

    def discover_node(self, session_id: str, node_id: str) -> HackingSession:
        return self.sessions.discover_node(session_id, node_id)

    def set_current_node(self, session_id: str, node_id: Optional[str]) -> HackingSession:
        return self.sessions.set_current_node(session_id, node_id)

    def compromise_node(self, session_id: str, node_id: str) -> HackingSession:
        session = self.sessions.get_session(session_id)
        with self._lock_for(session.network_id):
            self.sessions.compromise_node(session_id, node_id)

        self._emit_event(SimulationEvent(
            event_type=SimulationEventType.NODE_COMPROMISED,
            network_id=session.network_id,
            session_id=session_id,
            message=f"Node {node_id} compromised",
            data={"node_id": node_id},
        ))
        return session

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def teardown(self):
        """Drop every network, session and recorded event (mission end)"""
        logger.info(
            "Tearing down simulator: %d networks, %d sessions",
            len(self.store), len(self.sessions.get_all_sessions())
        )
        self.sessions.clear()
        self.store.clear()
        with self._locks_guard:
            self._locks.clear()
        self.event_history.clear()

    # =========================================================================
    # Event System
    # =========================================================================

    def add_event_listener(
        self,
        event_type: SimulationEventType,
        callback: Callable[[SimulationEvent], None]
    ):
        """Register a callback for a specific event type"""
        if event_type not in self.event_listeners:
            self.event_listeners[event_type] = []
        self.event_listeners[event_type].append(callback)

    def remove_event_listener(self, event_type: SimulationEventType, callback: Callable):
        """Remove a registered callback"""
        if event_type in self.event_listeners:
            self.event_listeners[event_type] = [
                cb for cb in self.event_listeners[event_type] if cb != callback
            ]

    def _emit_event(self, event: SimulationEvent):
        """Emit an event to all registered listeners"""
        self.event_history.append(event)
        overflow = len(self.event_history) - self.config.max_event_history
        if overflow > 0:
            del self.event_history[:overflow]

        for callback in self.event_listeners.get(event.event_type, []):
            try:
                callback(event)
            except Exception:
                logger.exception("Event listener failed for %s", event.event_type.name)

    def get_event_history(
        self,
        event_type: Optional[SimulationEventType] = None,
        limit: Optional[int] = None
    ) -> List[SimulationEvent]:
        """Get event history, optionally filtered by type"""
        events = self.event_history
        if event_type is not None:
            events = [e for e in events if e.event_type == event_type]
        if limit is not None:
            events = events[-limit:]
        return list(events)


# =============================================================================
# Convenience Functions
# =============================================================================

def create_simulator(seed: Optional[int] = None, config: Optional[SimulationConfig] = None) -> NetworkSimulator:
    """
    Create a simulator for one mission.

    Args:
        seed: Random seed for reproducible generation and defense rolls
        config: Optional tuning overrides

    Returns:
        A ready NetworkSimulator
    """
    return NetworkSimulator(config=config, seed=seed)
