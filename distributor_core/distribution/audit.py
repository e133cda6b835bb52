"""
Module 04 - Balance Sets & Manifests
File: audit.py

Purpose: Offline verification of a published manifest by a third party.

Checks:
- every claim's proof recomputes the manifest root
- every token carries an aggregate entry equal to the sum of its claims
- (with the raw balances) rebuilding yields the same root and claims
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from distributor_core.crypto.hashing import ZERO_ADDRESS, hash_leaf, to_hash32
from distributor_core.distribution.builder import BalanceSetBuilder
from distributor_core.distribution.manifest import DistributionManifest
from distributor_core.merkle.merkle_tree import verify_proof
from distributor_core.schemas.errors import DistributorException
from distributor_core.schemas.verification import CheckResult, VerificationResult


logger = logging.getLogger(__name__)


def _claim_verifies(account: str, token: str, amount: int, proof: list[str], root: bytes) -> bool:
    try:
        nodes = [to_hash32(node) for node in proof]
        leaf = hash_leaf(account, token, amount)
    except (ValueError, DistributorException):
        return False
    return verify_proof(leaf, nodes, root)


def audit_manifest(manifest: DistributionManifest) -> VerificationResult:
    """
    Verify every proof and every aggregate in a manifest.

    Returns:
        VerificationResult with one check per failure plus summary checks
    """
    result = VerificationResult.success()
    root = manifest.root_bytes
    verified = 0

    if not manifest.claims:
        result.add_check(CheckResult.failed("claims_present", "Manifest has no claims"))
        return result

    for token in manifest.tokens:
        token_claims = manifest.claims[token]

        for account, claim in sorted(token_claims.items()):
            if _claim_verifies(account, token, claim.amount, claim.proof, root):
                verified += 1
            else:
                result.add_check(CheckResult.failed(
                    f"proof_valid:{token}:{account}",
                    f"Proof for {account} does not verify against the root",
                    details={"account": account, "token": token, "amount": claim.amount},
                ))

        aggregate = token_claims.get(ZERO_ADDRESS)
        if aggregate is None:
            result.add_check(CheckResult.failed(
                f"aggregate_present:{token}",
                f"Token {token} has no aggregate entry",
                details={"token": token},
            ))
            continue

        total = sum(c.amount for a, c in token_claims.items() if a != ZERO_ADDRESS)
        if total != aggregate.amount:
            result.add_check(CheckResult.failed(
                f"aggregate_sum:{token}",
                f"Aggregate for {token} is {aggregate.amount}, claims sum to {total}",
                details={"token": token, "aggregate": str(aggregate.amount), "sum": str(total)},
            ))
        else:
            result.add_check(CheckResult.passed(
                f"aggregate_sum:{token}",
                f"Aggregate for {token} matches the sum of {len(token_claims) - 1} claims",
            ))

    if result.ok:
        result.add_check(CheckResult.passed(
            "proofs_verified",
            f"All {verified} proofs verify against {manifest.merkle_root}",
            details={"count": verified},
        ))

    logger.info(f"Audited manifest {manifest.merkle_root}: ok={result.ok} checks={len(result.checks)}")
    return result


def verify_rebuild(manifest: DistributionManifest, entries: Iterable[Any]) -> VerificationResult:
    """
    Rebuild the manifest from raw balances and compare.

    Input validation errors are reported as a failed check, not raised.
    """
    try:
        rebuilt = BalanceSetBuilder().build(entries)
    except DistributorException as e:
        result = VerificationResult.from_error(e.to_error_model())
        result.add_check(CheckResult.failed("rebuild", f"Balances cannot be built: {e.message}"))
        return result

    result = VerificationResult.success()
    if rebuilt.merkle_root == manifest.merkle_root:
        result.add_check(CheckResult.passed("root_matches", f"Rebuilt root {rebuilt.merkle_root} matches"))
    else:
        result.add_check(CheckResult.failed(
            "root_matches",
            f"Rebuilt root {rebuilt.merkle_root} differs from published {manifest.merkle_root}",
            details={"expected": manifest.merkle_root, "actual": rebuilt.merkle_root},
        ))

    if rebuilt.to_dict()["claims"] == manifest.to_dict()["claims"]:
        result.add_check(CheckResult.passed("claims_match", "Rebuilt claims match the manifest"))
    else:
        result.add_check(CheckResult.failed("claims_match", "Rebuilt claims differ from the manifest"))

    return result


__all__ = [
    "audit_manifest",
    "verify_rebuild",
]
