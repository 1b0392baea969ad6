"""Jetons de session signés."""

from cineamore.adapters.auth.session_tokens import SessionTokenCodec

__all__ = ["SessionTokenCodec"]
