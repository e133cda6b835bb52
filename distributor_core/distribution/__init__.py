"""
Module 04 - Balance Sets & Manifests

Validation of raw balance sets, manifest construction, manifest IO and
third-party audit.

Usage:
    from distributor_core.distribution import BalanceSetBuilder, audit_manifest

    manifest = BalanceSetBuilder().build(entries)
    assert audit_manifest(manifest).ok
"""
from .manifest import (
    BalanceEntry,
    DistributionManifest,
    ManifestClaim,
    ValidatedEntry,
)
from .builder import BalanceSetBuilder, parse_balance_map
from .audit import audit_manifest, verify_rebuild
from .io import load_balances, load_manifest, manifest_content_hash, save_manifest


__all__ = [
    "BalanceEntry",
    "DistributionManifest",
    "ManifestClaim",
    "ValidatedEntry",
    "BalanceSetBuilder",
    "parse_balance_map",
    "audit_manifest",
    "verify_rebuild",
    "load_balances",
    "load_manifest",
    "manifest_content_hash",
    "save_manifest",
]
