"""
Module 07 - CLI Build Command

Build a distribution manifest from a balance file.

Usage:
    distributor build balances.json --out manifest.json [--json]
    distributor build balances.csv            # manifest to stdout
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
    BalanceSetBuilder,
    load_balances,
    save_manifest,
)
from distributor_core.schemas.errors import BalanceValidationException, ManifestIOError


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


@dataclass
class BuildSummary:
    """Summary of a manifest build for CLI output."""
    balances_path: str = ""
    output_path: str | None = None
    merkle_root: str = ""
    content_hash: str = ""
    claims: int = 0
    tokens: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if d["output_path"] is None:
            del d["output_path"]
        return d


def print_summary_human(summary: BuildSummary) -> None:
    """Print summary in human-readable format."""
    print(f"balances: {summary.balances_path}")
    if summary.output_path:
        print(f"manifest: {summary.output_path}")
    print(f"merkle_root: {summary.merkle_root}")
    print(f"sha256: {summary.content_hash}")
    print(f"claims: {summary.claims}")
    for token, total in summary.tokens.items():
        print(f"  {token}: {total}")


def build_cmd(args: Namespace) -> int:
    """
    Execute the build command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    balances_path = Path(args.balances)
    config = args.runtime_config

    try:
        entries = load_balances(balances_path)
        manifest = BalanceSetBuilder().build(entries)
    except (ManifestIOError, BalanceValidationException) as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if not args.out:
        # Manifest itself goes to stdout; nothing else may be printed
        print(manifest.to_json(indent=config.output.indent))
        return EXIT_SUCCESS

    try:
        content_hash = save_manifest(manifest, args.out, indent=config.output.indent)
    except ManifestIOError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary = BuildSummary(
        balances_path=str(balances_path),
        output_path=str(args.out),
        merkle_root=manifest.merkle_root,
        content_hash=content_hash,
        claims=sum(len(manifest.accounts(token)) for token in manifest.tokens),
        tokens={
            token: str(manifest.aggregate_claim(token).amount)
            for token in manifest.tokens
        },
    )

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS
