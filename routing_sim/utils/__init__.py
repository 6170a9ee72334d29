"""Utilities for routing simulation.

This module provides metrics export and plotting helpers.
"""
