# =============================================================================
# Dynamic Network Simulator - Session Manager
# =============================================================================
"""
Tracks hacking sessions against stored networks: command history,
accumulated suspicion, and the derived traceback risk.
"""

import logging
import time
from typing import Callable, Dict, List, Optional

from .errors import InvalidArgumentError, NotFoundError
from .data_structures import (
    HackingSession, SessionCommand, SimulationConfig, TracebackEvent, make_id
)
from .network_map import NetworkMap
from .network_store import NetworkStore

logger = logging.getLogger(__name__)

FAILED_COMMAND_EVIDENCE = ("failed_authentication", "unusual_activity")


class SessionManager:
    """
    Owns the live HackingSessions of one simulator.

    Every lookup of an unknown session, network or node raises
    NotFoundError.
    """

    # Traceback risk weights
    COMMAND_WEIGHT = 2
    MINUTE_WEIGHT = 5
    FAILED_COMMAND_WEIGHT = 10
    HIGH_VALUE_NODE_WEIGHT = 20

    def __init__(
        self,
        store: NetworkStore,
        config: Optional[SimulationConfig] = None,
        clock: Callable[[], float] = time.time
    ):
        self.store = store
        self.config = config or SimulationConfig()
        self.clock = clock
        self._sessions: Dict[str, HackingSession] = {}

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start_session(
        self,
        network_id: str,
        player_id: str,
        origin_address: Optional[str] = None
    ) -> HackingSession:
        """Open a fresh session bound to an existing network"""
        self.store.get(network_id)

        session = HackingSession(
            id=make_id("session"),
            network_id=network_id,
            player_id=player_id,
            start_time=self.clock(),
            origin_address=origin_address or self.config.default_origin_address,
        )
        self._sessions[session.id] = session
        logger.info("Session %s started against %s by %s", session.id, network_id, player_id)
        return session

    def get_session(self, session_id: str) -> HackingSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise NotFoundError("session", session_id)
        return session

    def get_sessions_for_network(self, network_id: str) -> List[HackingSession]:
        return [s for s in self._sessions.values() if s.network_id == network_id]

    def get_all_sessions(self) -> List[HackingSession]:
        return list(self._sessions.values())

    def end_session(self, session_id: str) -> HackingSession:
        session = self.get_session(session_id)
        del self._sessions[session_id]
        logger.info("Session %s ended after %d commands", session_id, session.total_commands)
        return session

    def clear(self):
        self._sessions.clear()

    # =========================================================================
    # Commands
    # =========================================================================

    def record_command(self, session_id: str, command: SessionCommand) -> TracebackEvent:
        """
        Append a command to the session and log it on the bound network.

        Returns:
            The TracebackEvent appended to the network
        """
        if command.suspicion_generated < 0:
            raise InvalidArgumentError(
                f"suspicion_generated must not be negative, got {command.suspicion_generated}"
            )

        session = self.get_session(session_id)
        network = self.store.get(session.network_id)
        if command.node_id:
            network.get_node(command.node_id).last_accessed = command.timestamp

        session.command_history.append(command)
        overflow = len(session.command_history) - self.config.max_command_history
        if overflow > 0:
            del session.command_history[:overflow]

        session.total_commands += 1
        if not command.success:
            session.failed_commands += 1
        session.suspicion_level += command.suspicion_generated

        event = TracebackEvent(
            id=make_id("trace"),
            timestamp=command.timestamp,
            source_address=session.origin_address,
            target_node=command.node_id,
            action=command.command,
            suspicion_generated=command.suspicion_generated,
            detected=command.suspicion_generated > self.config.detection_threshold,
            evidence=() if command.success else FAILED_COMMAND_EVIDENCE,
        )
        self._append_event(network, event)

        session.traceback_risk = self.calculate_traceback_risk(session_id)
        if event.detected:
            logger.info(
                "Session %s: '%s' on %s was detected (risk %d)",
                session_id, command.command, command.node_id or "-", session.traceback_risk
            )
        return event

    def _append_event(self, network: NetworkMap, event: TracebackEvent):
        network.traceback_events.append(event)
        overflow = len(network.traceback_events) - self.config.max_traceback_events
        if overflow > 0:
            del network.traceback_events[:overflow]

    # =========================================================================
    # Traceback Risk
    # =========================================================================

    def calculate_traceback_risk(self, session_id: str) -> int:
        """
        Risk that defenders identify the session, 0 - 100.

        2 per command, 5 per elapsed minute, 10 per failed command, the
        accumulated suspicion, and 20 per compromised admin panel or
        database. Reads state only.
        """
        session = self.get_session(session_id)
        network = self.store.get(session.network_id)

        elapsed_minutes = max(0, int((self.clock() - session.start_time) // 60))
        high_value = sum(
            1 for node_id in session.compromised_nodes
            if node_id in network.nodes and network.nodes[node_id].node_type.is_high_value
        )

        risk = (
            session.total_commands * self.COMMAND_WEIGHT
            + elapsed_minutes * self.MINUTE_WEIGHT
            + session.failed_commands * self.FAILED_COMMAND_WEIGHT
            + session.suspicion_level
            + high_value * self.HIGH_VALUE_NODE_WEIGHT
        )
        return max(0, min(100, risk))

    # =========================================================================
    # Progress Tracking
    # =========================================================================

    def set_current_node(self, session_id: str, node_id: Optional[str]) -> HackingSession:
        session = self.get_session(session_id)
        if node_id is not None:
            self.store.get(session.network_id).get_node(node_id)
            self._remember(session.discovered_nodes, node_id)
        session.current_node = node_id
        return session

    def discover_node(self, session_id: str, node_id: str) -> HackingSession:
        session = self.get_session(session_id)
        self.store.get(session.network_id).get_node(node_id)
        self._remember(session.discovered_nodes, node_id)
        return session

    def compromise_node(self, session_id: str, node_id: str) -> HackingSession:
        """Mark a node compromised and credit it to the session"""
        session = self.get_session(session_id)
        node = self.store.get(session.network_id).get_node(node_id)

        node.compromised = True
        node.last_accessed = self.clock()
        self._remember(session.discovered_nodes, node_id)
        self._remember(session.compromised_nodes, node_id)
        session.traceback_risk = self.calculate_traceback_risk(session_id)
        return session

    def forget_backdoors(self, network_id: str, backdoor_ids: List[str]):
        """Drop discovered backdoors from every session on the network"""
        if not backdoor_ids:
            return
        gone = set(backdoor_ids)
        for session in self.get_sessions_for_network(network_id):
            session.active_backdoors = [b for b in session.active_backdoors if b not in gone]

    @staticmethod
    def _remember(items: List[str], node_id: str):
        if node_id not in items:
            items.append(node_id)
