"""
CLI runner module.

Provides commands:
- init: Create config, seed banks
- scan: Decode and gate scanner payloads
- banks / beneficiaries: Manage registries
- history: List, export, clear
- stats: Aggregated totals
- reset: Wipe all stored data
"""

from .main import create_cli, main

__all__ = [
    "create_cli",
    "main",
]
