"""
Engine package for the Round-Robin & Deadlock Simulator.
Contains the engine facades, configuration validation and the step driver.
"""
