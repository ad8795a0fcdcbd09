"""
Algorithms package for the Round-Robin & Deadlock Simulator.
Contains the Round-Robin tick transition, resource allocation operations
and wait-for-graph deadlock detection.
"""
