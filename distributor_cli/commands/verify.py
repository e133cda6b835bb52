"""
Module 07 - CLI Verify Command

Audit a published manifest offline:
- Every proof recomputes the merkle root
- Every token's aggregate equals the sum of its claims
- Optionally, rebuilding from the raw balances yields the same manifest

Usage:
    distributor verify manifest.json [--balances balances.json] [--json] [--debug]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from distributor_core.distribution import (
    audit_manifest,
    load_balances,
    load_manifest,
    manifest_content_hash,
    verify_rebuild,
)
from distributor_core.schemas.errors import ManifestIOError
from distributor_core.schemas.verification import VerificationResult


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of manifest verification for CLI output."""
    manifest_path: str = ""
    merkle_root: str = ""
    content_hash: str = ""
    proofs_ok: bool = False
    rebuild_ok: bool | None = None
    checks: list[dict[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if self.rebuild_ok is None:
            del d["rebuild_ok"]
        if not d["checks"]:
            del d["checks"]
        if not d["errors"]:
            del d["errors"]
        return d

    @property
    def all_ok(self) -> bool:
        """Check if all verifications passed."""
        return self.proofs_ok and self.rebuild_ok is not False


def build_summary(
    manifest_path: str,
    merkle_root: str,
    content_hash: str,
    audit_result: VerificationResult,
    rebuild_result: VerificationResult | None = None,
    debug: bool = False,
) -> VerifySummary:
    """Build a VerifySummary from verification results."""
    summary = VerifySummary(
        manifest_path=manifest_path,
        merkle_root=merkle_root,
        content_hash=content_hash,
        proofs_ok=audit_result.ok,
    )

    sources = [("audit", audit_result)]
    if rebuild_result is not None:
        summary.rebuild_ok = rebuild_result.ok
        sources.append(("rebuild", rebuild_result))

    for source, result in sources:
        for check in result.get_failed_checks():
            summary.errors.append(f"{source.capitalize()}: {check.message}")
        if debug:
            summary.checks.extend(
                {
                    "source": source,
                    "check_id": check.check_id,
                    "ok": check.ok,
                    "message": check.message,
                }
                for check in result.checks
            )

    return summary


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"manifest: {summary.manifest_path}")
    print(f"merkle_root: {summary.merkle_root}")
    print(f"sha256: {summary.content_hash}")
    print(f"proofs_ok: {str(summary.proofs_ok).lower()}")
    if summary.rebuild_ok is not None:
        print(f"rebuild_ok: {str(summary.rebuild_ok).lower()}")

    if summary.errors:
        print(f"\nerrors ({len(summary.errors)}):")
        for err in summary.errors[:10]:
            print(f"  ✗ {err}")

    if summary.checks:
        passed = sum(1 for c in summary.checks if c["ok"])
        failed = len(summary.checks) - passed
        print(f"\nchecks: {passed} passed, {failed} failed")
        for check in summary.checks[:20]:
            status = "✓" if check["ok"] else "✗"
            print(f"  {status} [{check['source']}] {check['check_id']}")


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    manifest_path = Path(args.manifest)

    try:
        manifest = load_manifest(manifest_path)
    except ManifestIOError as e:
        print(f"Error loading manifest: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    logger.info(f"Auditing proofs of {manifest_path}")
    audit_result = audit_manifest(manifest)

    rebuild_result = None
    if args.balances:
        try:
            entries = load_balances(args.balances)
        except ManifestIOError as e:
            print(f"Error loading balances: {e.message}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR
        logger.info(f"Rebuilding manifest from {args.balances}")
        rebuild_result = verify_rebuild(manifest, entries)

    summary = build_summary(
        manifest_path=str(manifest_path),
        merkle_root=manifest.merkle_root,
        content_hash=manifest_content_hash(manifest),
        audit_result=audit_result,
        rebuild_result=rebuild_result,
        debug=args.debug,
    )

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    if summary.all_ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS

    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
