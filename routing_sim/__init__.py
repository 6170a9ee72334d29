"""Discrete-time packet routing simulation.

This package models a small network of hosts, switches and routers with
static routing tables, and forwards packets hop-by-hop using longest
prefix matching, TTL decay and per-link utilization accounting.
"""
