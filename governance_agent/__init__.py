"""Governance Proposal Agent - idea to structured governance proposal."""

__version__ = "1.0.0"
