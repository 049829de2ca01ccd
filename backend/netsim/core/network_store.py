# =============================================================================
# Dynamic Network Simulator - Network Store
# =============================================================================
"""
Exclusive owner of the generated networks, keyed by id.
"""

import logging
from typing import Dict, Iterator, List

from .errors import InvalidArgumentError, NotFoundError
from .network_map import NetworkMap

logger = logging.getLogger(__name__)


class NetworkStore:
    """
    In-memory map of network id to NetworkMap.

    Constructed per simulator (one per mission), never shared through
    module-level state.
    """

    def __init__(self):
        self._networks: Dict[str, NetworkMap] = {}

    def add(self, network: NetworkMap) -> NetworkMap:
        if network.id in self._networks:
            raise InvalidArgumentError(f"Network id already stored: {network.id}")
        self._networks[network.id] = network
        logger.debug("Stored network %s (%s)", network.id, network.name)
        return network

    def get(self, network_id: str) -> NetworkMap:
        """Get a network by id, raising NotFoundError for unknown ids"""
        network = self._networks.get(network_id)
        if network is None:
            raise NotFoundError("network", network_id)
        return network

    def get_all(self) -> List[NetworkMap]:
        return list(self._networks.values())

    def remove(self, network_id: str) -> NetworkMap:
        network = self.get(network_id)
        del self._networks[network_id]
        return network

    def clear(self):
        self._networks.clear()

    def __contains__(self, network_id: object) -> bool:
        return network_id in self._networks

    def __len__(self) -> int:
        return len(self._networks)

    def __iter__(self) -> Iterator[NetworkMap]:
        return iter(list(self._networks.values()))
