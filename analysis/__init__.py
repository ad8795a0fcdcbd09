"""
Analysis package for the Round-Robin & Deadlock Simulator.
Contains the event model, scheduling metrics and quantum comparison.
"""
