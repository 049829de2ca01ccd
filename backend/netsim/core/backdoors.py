# =============================================================================
# Dynamic Network Simulator - Backdoor Lifecycle
# =============================================================================
"""
Installs persistence mechanisms on compromised nodes and moves them
through their one-way lifecycle: active with growing discovery risk,
then discovered (inactive) for good.
"""

import logging
import time
from typing import Callable, Optional, Union

from .enums import BackdoorType
from .errors import InvalidStateError, NotFoundError
from .data_structures import Backdoor, NetworkNode, SimulationConfig, clamp, make_id
from .network_store import NetworkStore

logger = logging.getLogger(__name__)


class BackdoorManager:
    """Creates backdoors and applies every change to their risk and state"""

    def __init__(
        self,
        store: NetworkStore,
        config: Optional[SimulationConfig] = None,
        clock: Callable[[], float] = time.time
    ):
        self.store = store
        self.config = config or SimulationConfig()
        self.clock = clock

    def install_backdoor(
        self,
        network_id: str,
        node_id: str,
        backdoor_type: Union[BackdoorType, str]
    ) -> Backdoor:
        """
        Install a backdoor on a compromised node.

        Raises:
            NotFoundError: unknown network or node
            InvalidStateError: the node is not compromised
            InvalidArgumentError: unknown backdoor type
        """
        backdoor_type = BackdoorType.parse(backdoor_type)
        node = self.store.get(network_id).get_node(node_id)
        if not node.compromised:
            raise InvalidStateError(f"Node not compromised: {node_id}")

        now = self.clock()
        backdoor = Backdoor(
            id=make_id("backdoor"),
            backdoor_type=backdoor_type,
            install_time=now,
            last_used=now,
            discovery_risk=self.config.initial_discovery_risk,
            active=True,
            payload=backdoor_type.payload,
            trigger_condition=backdoor_type.trigger_condition,
        )
        node.backdoors.append(backdoor)
        logger.info("Installed %s backdoor %s on %s/%s", backdoor_type, backdoor.id, network_id, node_id)
        return backdoor

    def find_backdoor(self, network_id: str, backdoor_id: str) -> Backdoor:
        for node in self.store.get(network_id).nodes.values():
            for backdoor in node.backdoors:
                if backdoor.id == backdoor_id:
                    return backdoor
        raise NotFoundError("backdoor", backdoor_id)

    def use_backdoor(self, network_id: str, backdoor_id: str) -> Backdoor:
        backdoor = self.find_backdoor(network_id, backdoor_id)
        if not backdoor.active:
            raise InvalidStateError(f"Backdoor already discovered: {backdoor_id}")
        backdoor.last_used = self.clock()
        return backdoor

    @staticmethod
    def escalate(backdoor: Backdoor, amount: int) -> int:
        """Raise discovery risk of an active backdoor; never lowers it"""
        if backdoor.active and amount > 0:
            backdoor.discovery_risk = clamp(backdoor.discovery_risk + amount)
        return backdoor.discovery_risk

    @staticmethod
    def mark_discovered(node: NetworkNode, backdoor: Backdoor) -> bool:
        """
        Deactivate a backdoor permanently.
        Returns False if it was already inactive.
        """
        if not backdoor.active:
            return False
        backdoor.active = False
        logger.info("Backdoor %s on %s discovered at risk %d", backdoor.id, node.id, backdoor.discovery_risk)
        return True
