# =============================================================================
# Dynamic Network Simulator - Backend Package
# =============================================================================
"""
Dynamic Network Simulator Backend

Procedural target networks and intrusion sessions for a hacking game:
topology generation, hacking sessions with traceback risk, backdoor
persistence, and an autonomous defense that hardens the network over time.
"""

__version__ = "0.1.0"
