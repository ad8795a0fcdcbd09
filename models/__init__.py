"""
Models package for the Round-Robin & Deadlock Simulator.
Contains processes, scheduler state, resources and the resource graph.
"""
