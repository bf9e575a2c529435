"""
Core domain models, fee math, error taxonomy, and contracts.

This module contains the foundational building blocks that are independent
of external systems (exchange venues, ledger storage, etc.).
"""
