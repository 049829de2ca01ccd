"""
REST surface over the simulator.
"""
