"""Gatekeeper — классификация переводов и governance-гейт.

- FeeClassifier: направление перевода (BUY/SELL/TRANSFER/NO_FEE) и комиссия
- GovernanceGate: authority-gated мутаторы с bound-checks и идемпотентностью
"""

from .fee_classifier import FeeClassification, FeeClassifier
from .governance import GovernanceGate, authorize, compare_and_set

__all__ = [
    "FeeClassifier",
    "FeeClassification",
    "GovernanceGate",
    "authorize",
    "compare_and_set",
]
