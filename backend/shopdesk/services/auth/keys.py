"""Revocation-store key names shared by the session manager and the authenticator."""

from __future__ import annotations


def jti_key(jti: str) -> str:
    return f"jti:{jti}"


def sid_key(session_id: str) -> str:
    return f"sid:{session_id}"
