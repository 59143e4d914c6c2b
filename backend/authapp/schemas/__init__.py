"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import PrincipalSchema, SignInSchema, SignUpSchema, TokenResponseSchema

__all__ = ["PrincipalSchema", "SignInSchema", "SignUpSchema", "TokenResponseSchema"]
