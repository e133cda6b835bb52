"""
Cumulative Merkle distribution engine.

Subpackages:
    crypto        hash primitive and leaf encoding
    merkle        tree construction, proofs and verification
    distribution  balance-set validation, manifest building, IO and audit
    ledger        claim ledger state machine
    schemas       error taxonomy, canonical JSON, claim and verification models
    config        runtime configuration
"""

__version__ = "0.1.0"
