"""Dual-token session protocol: decision engine and token issuance."""

from __future__ import annotations

from .decision import Rejection, SessionDecision, SessionDecisionEngine
from .issuance import SessionIssuer

__all__ = ["Rejection", "SessionDecision", "SessionDecisionEngine", "SessionIssuer"]
