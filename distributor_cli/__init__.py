"""
Module 07 - Distributor CLI

Command-line interface for building and auditing distribution manifests.

Usage:
    python -m distributor_cli build balances.json --out manifest.json
    python -m distributor_cli verify manifest.json --balances balances.json
    python -m distributor_cli proof manifest.json --account 0x... --token 0x...
"""

__version__ = "0.1.0"
