"""
Module 04 - Balance Sets & Manifests
File: io.py

Purpose: Save and load manifests, and read raw balance files.

Balance files are either a JSON list of {"account", "token", "amount"}
objects or a CSV with an ``account,token,amount`` header.
"""

from __future__ import annotations

import csv
import hashlib
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from distributor_core.distribution.manifest import BalanceEntry, DistributionManifest
from distributor_core.schemas.errors import InvalidAddressError, ManifestIOError


logger = logging.getLogger(__name__)

BALANCE_CSV_FIELDS = ("account", "token", "amount")


def manifest_content_hash(manifest: DistributionManifest) -> str:
    """SHA-256 hex digest of the canonical manifest JSON."""
    return hashlib.sha256(manifest.to_json().encode("utf-8")).hexdigest()


def save_manifest(
    manifest: DistributionManifest,
    path: str | Path,
    *,
    indent: int | None = 2,
) -> str:
    """
    Write a manifest to disk.

    Returns:
        The manifest content hash (independent of indentation)
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(manifest.to_json(indent=indent) + "\n", encoding="utf-8")
    except OSError as e:
        raise ManifestIOError(f"Cannot write manifest: {e}", path=str(path)) from e

    content_hash = manifest_content_hash(manifest)
    logger.info(f"Wrote manifest {path} (root={manifest.merkle_root}, sha256={content_hash})")
    return content_hash


def load_manifest(path: str | Path) -> DistributionManifest:
    """
    Read a manifest from disk.

    Raises:
        ManifestIOError: If the file is missing or not a valid manifest.
    """
    path = Path(path)
    if not path.exists():
        raise ManifestIOError(f"Manifest not found: {path}", path=str(path))

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return DistributionManifest.from_dict(data)
    except (OSError, ValueError, AttributeError, InvalidAddressError) as e:
        raise ManifestIOError(f"Invalid manifest: {e}", path=str(path)) from e


def _read_csv_rows(path: Path) -> list[dict[str, Any]]:
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        missing = [name for name in BALANCE_CSV_FIELDS if name not in (reader.fieldnames or [])]
        if missing:
            raise ManifestIOError(
                f"CSV needs header: {','.join(BALANCE_CSV_FIELDS)}",
                path=str(path),
                details={"missing": missing},
            )
        return [
            {name: (row.get(name) or "").strip() for name in BALANCE_CSV_FIELDS}
            for row in reader
            if any((row.get(name) or "").strip() for name in BALANCE_CSV_FIELDS)
        ]


def load_balances(path: str | Path) -> list[BalanceEntry]:
    """
    Read raw balance entries from a JSON or CSV file.

    Entries are parsed but not validated; pass them to BalanceSetBuilder.

    Raises:
        ManifestIOError: If the file cannot be read or parsed.
    """
    path = Path(path)
    if not path.exists():
        raise ManifestIOError(f"Balance file not found: {path}", path=str(path))

    try:
        if path.suffix.lower() == ".csv":
            rows = _read_csv_rows(path)
        else:
            rows = json.loads(path.read_text(encoding="utf-8"))
            if isinstance(rows, dict):
                rows = rows.get("balances", [])
        if not isinstance(rows, list):
            raise ManifestIOError("Balance file must contain a list of entries", path=str(path))
        entries = [BalanceEntry.model_validate(row) for row in rows]
    except ManifestIOError:
        raise
    except (OSError, ValueError, ValidationError) as e:
        raise ManifestIOError(f"Invalid balance file: {e}", path=str(path)) from e

    logger.debug(f"Loaded {len(entries)} balance entries from {path}")
    return entries


__all__ = [
    "BALANCE_CSV_FIELDS",
    "manifest_content_hash",
    "save_manifest",
    "load_manifest",
    "load_balances",
]
