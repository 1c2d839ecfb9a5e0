"""Discrete-event simulation of passenger flow and train dispatch on a rail line."""

__version__ = "0.1.0"
