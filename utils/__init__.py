"""
Utilities package for the Round-Robin & Deadlock Simulator.
Contains logging and scenario loading.
"""
