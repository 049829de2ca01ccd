# =============================================================================
# Dynamic Network Simulator - Command Line Interface
# =============================================================================
"""
Simple CLI for exercising the simulator.
"""

import time

from netsim.core import (
    NetworkSimulator, NetworkMap, SessionCommand, BackdoorType,
    Difficulty, SimulationEventType
)


def print_header():
    """Print simulator header"""
    print("\n" + "=" * 60)
    print("   DYNAMIC NETWORK SIMULATOR")
    print("   Procedural targets, sessions and defense")
    print("=" * 60 + "\n")


def print_network(network: NetworkMap):
    """Print a network summary"""
    print(f"\n{'='*50}")
    print(f"{network.name} [{network.id}] - {network.difficulty.value}")
    print(f"{'='*50}")
    print(f"Nodes: {network.node_count} | Subnets: {len(network.subnets)} | "
          f"Global alert: {network.global_alert_level} | "
          f"Detected events: {len(network.detected_events)}/{len(network.traceback_events)}")

    for subnet in network.subnets:
        print(f"\n  {subnet.name} {subnet.cidr}{' (isolated)' if subnet.isolated else ''}")
        for node_id in subnet.node_ids:
            node = network.nodes[node_id]
            flags = []
            if node.compromised:
                flags.append("PWNED")
            if node.active_backdoors:
                flags.append(f"{len(node.active_backdoors)} backdoor(s)")
            open_ports = ",".join(str(p.number) for p in node.open_ports) or "-"
            print(f"    {node.id:<8} {node.address:<16} {node.node_type.value:<12} "
                  f"patch={node.patch_level:<3} alert={node.alert_level:<3} "
                  f"open={open_ports} {' '.join(flags)}")


def demo_run(ticks: int = 20):
    """Run a scripted session with periodic defense ticks"""
    print_header()
    sim = NetworkSimulator()
    sim.add_event_listener(
        SimulationEventType.BACKDOOR_DISCOVERED,
        lambda e: print(f"  !! {e.message} (global alert {e.data['global_alert_level']})")
    )

    network = sim.generate_network(Difficulty.MEDIUM, 12)
    print_network(network)

    session = sim.start_session(network.id, "demo-player")
    target = network.node_order()[0]
    for command, success, suspicion in [
        ("nmap -sV", True, 5), ("hydra ssh", False, 15), ("exploit", True, 25)
    ]:
        sim.record_command(session.id, SessionCommand(
            command=command, timestamp=time.time(), node_id=target,
            success=success, suspicion_generated=suspicion,
        ))
    sim.compromise_node(session.id, target)
    sim.install_backdoor(network.id, target, BackdoorType.SHELL, session_id=session.id)

    print(f"\nTraceback risk after intrusion: {sim.calculate_traceback_risk(session.id)}")
    print(f"\nRunning {ticks} defense ticks...")
    for _ in range(ticks):
        sim.simulate_ai_defense(network.id)

    print_network(network)
    print(f"\nActive backdoors left in session: {len(session.active_backdoors)}")


def main():
    """Main entry point"""
    print_header()

    print("Options:")
    print("  1. Run Demo")
    print("  2. Generate and Inspect Network")
    print("  3. Exit")

    choice = input("\nChoice [1-3]: ").strip()

    if choice == "1":
        demo_run()
    elif choice == "2":
        difficulty = input("Difficulty [easy/medium/hard/expert]: ").strip() or "medium"
        size = input("Node count [10]: ").strip() or "10"
        sim = NetworkSimulator()
        print_network(sim.generate_network(difficulty, int(size)))
    elif choice == "3":
        print("Goodbye!")
    else:
        print("Invalid choice")


if __name__ == "__main__":
    main()
