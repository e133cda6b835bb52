"""
Module 07 - CLI Proof Command

Print the claim request an account would submit for a token, and whether
both of its proofs verify against the manifest root.

Usage:
    distributor proof manifest.json --account 0x... --token 0x... [--json]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from pathlib import Path

from distributor_core.crypto.hashing import ZERO_ADDRESS, hash_leaf, normalize_address, to_hash32
from distributor_core.distribution import load_manifest
from distributor_core.merkle.merkle_tree import verify_proof
from distributor_core.schemas.errors import InvalidAddressError, ManifestIOError


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def _proof_verifies(account: str, token: str, amount: int, proof: list[str], root: bytes) -> bool:
    try:
        nodes = [to_hash32(node) for node in proof]
        leaf = hash_leaf(account, token, amount)
    except ValueError:
        return False
    return verify_proof(leaf, nodes, root)


def proof_cmd(args: Namespace) -> int:
    """
    Execute the proof command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (2 if the manifest's proofs for this claim do not verify)
    """
    try:
        manifest = load_manifest(Path(args.manifest))
        account = normalize_address(args.account)
        token = normalize_address(args.token)
    except (ManifestIOError, InvalidAddressError) as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        request = manifest.claim_request(account, token)
    except KeyError as e:
        print(f"Error: {e.args[0]}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    root = manifest.root_bytes
    valid = _proof_verifies(
        account, token, request.cumulative_amount, request.proof, root
    ) and _proof_verifies(
        ZERO_ADDRESS, token, request.aggregate_cumulative_amount, request.aggregate_proof, root
    )

    if args.json:
        data = {
            "account": account,
            "merkle_root": manifest.merkle_root,
            "valid": valid,
            "request": request.model_dump(),
        }
        # Amounts may exceed JSON number precision in other consumers
        data["request"]["cumulative_amount"] = str(request.cumulative_amount)
        data["request"]["aggregate_cumulative_amount"] = str(request.aggregate_cumulative_amount)
        print(json.dumps(data, indent=2))
    else:
        print(f"account: {account}")
        print(f"token: {token}")
        print(f"merkle_root: {manifest.merkle_root}")
        print(f"cumulative_amount: {request.cumulative_amount}")
        print(f"aggregate_cumulative_amount: {request.aggregate_cumulative_amount}")
        print(f"proof ({len(request.proof)}):")
        for node in request.proof:
            print(f"  {node}")
        print(f"aggregate_proof ({len(request.aggregate_proof)}):")
        for node in request.aggregate_proof:
            print(f"  {node}")
        print(f"valid: {str(valid).lower()}")

    return EXIT_SUCCESS if valid else EXIT_VERIFICATION_FAILED
