"""Traffic generation for routing simulation.

This module provides the fixed-rate packet generator that feeds the
forwarding engine.
"""
