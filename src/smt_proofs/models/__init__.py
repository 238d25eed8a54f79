"""
Serialization Models Package

Pydantic models for reading and writing proofs and tree summaries as JSON.

Usage:
    from smt_proofs.models import ProofModel

    document = ProofModel.from_proof(proof, "sha256").model_dump_json(indent=2)
    proof = ProofModel.model_validate_json(document).to_proof()
"""

from .proof_models import ProofModel, TreeSummaryModel

__all__ = [
    "ProofModel",
    "TreeSummaryModel",
]
