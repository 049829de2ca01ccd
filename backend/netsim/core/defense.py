# =============================================================================
# Dynamic Network Simulator - Defense Simulator
# =============================================================================
"""
One discrete tick of autonomous network hardening.

The host game loop calls tick() periodically. Each tick can raise patch
levels, grow and roll backdoor discovery, and patch away vulnerabilities.
The longer a backdoor stays installed the likelier its discovery, and each
discovery raises both the node's and the network's alert level.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .data_structures import NetworkNode, SimulationConfig, clamp
from .network_map import NetworkMap
from .backdoors import BackdoorManager

logger = logging.getLogger(__name__)


@dataclass
class DefenseReport:
    """What a single defense tick changed"""
    network_id: str
    patched_nodes: Dict[str, int] = field(default_factory=dict)  # node id -> new patch level
    discovered_backdoors: List[str] = field(default_factory=list)
    removed_vulnerabilities: List[str] = field(default_factory=list)
    global_alert_level: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.patched_nodes or self.discovered_backdoors or self.removed_vulnerabilities)

    def to_dict(self) -> Dict:
        return {
            "network_id": self.network_id,
            "patched_nodes": dict(self.patched_nodes),
            "discovered_backdoors": list(self.discovered_backdoors),
            "removed_vulnerabilities": list(self.removed_vulnerabilities),
            "global_alert_level": self.global_alert_level,
        }


class DefenseSimulator:
    """Applies defense ticks to networks using the injected random source"""

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        rng: Optional[random.Random] = None
    ):
        self.config = config or SimulationConfig()
        self.rng = rng or random.Random(self.config.seed)

    def tick(self, network: NetworkMap) -> DefenseReport:
        """Run one defense tick over every node of the network"""
        report = DefenseReport(network_id=network.id)

        for node in network.nodes.values():
            self._roll_patch(node, report)
            self._roll_discovery(network, node, report)
            self._roll_vulnerability_patches(node, report)

        report.global_alert_level = network.global_alert_level
        if report.discovered_backdoors:
            logger.info(
                "Defense tick on %s discovered %d backdoor(s), global alert %d",
                network.id, len(report.discovered_backdoors), network.global_alert_level
            )
        return report

    def _roll_patch(self, node: NetworkNode, report: DefenseReport):
        if self.rng.random() < self.config.patch_probability:
            increment = self.rng.randint(1, self.config.max_patch_increment)
            node.patch_level = clamp(node.patch_level + increment)
            report.patched_nodes[node.id] = node.patch_level

    def _roll_discovery(self, network: NetworkMap, node: NetworkNode, report: DefenseReport):
        for backdoor in node.active_backdoors:
            BackdoorManager.escalate(backdoor, self.rng.randint(1, self.config.max_risk_increment))

            if self.rng.random() * 100 < backdoor.discovery_risk:
                BackdoorManager.mark_discovered(node, backdoor)
                node.alert_level = clamp(node.alert_level + self.config.discovery_alert_increase)
                network.raise_global_alert(self.config.discovery_global_alert_increase)
                report.discovered_backdoors.append(backdoor.id)

    def _roll_vulnerability_patches(self, node: NetworkNode, report: DefenseReport):
        for port in node.ports:
            vuln = port.vulnerability
            if vuln is not None and vuln.patchable:
                if self.rng.random() < self.config.vulnerability_patch_probability:
                    port.vulnerability = None
                    report.removed_vulnerabilities.append(vuln.id)
