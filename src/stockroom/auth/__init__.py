"""Authenticator abstraction: pluggable bearer-token verification."""

import os

_authenticator_instance = None


def get_authenticator():
    """Return the configured authenticator (singleton).

    Uses the static token table (STOCKROOM_AUTH_TOKENS) by default. Set
    STOCKROOM_AUTHENTICATOR=jwt and STOCKROOM_JWT_SECRET to verify JWTs.
    """
    global _authenticator_instance
    if _authenticator_instance is None:
        adapter = os.environ.get("STOCKROOM_AUTHENTICATOR", "static")
        if adapter == "static":
            from stockroom.auth.fake_adapter import StaticTokenAuthenticator

            _authenticator_instance = StaticTokenAuthenticator.from_spec(os.environ.get("STOCKROOM_AUTH_TOKENS", ""))
        elif adapter == "jwt":
            from stockroom.auth.jwt_adapter import JwtAuthenticator

            _authenticator_instance = JwtAuthenticator(os.environ.get("STOCKROOM_JWT_SECRET", ""))
        else:
            raise ValueError(f"Unknown authenticator adapter: {adapter}")
    return _authenticator_instance


def reset_authenticator():
    """Reset the authenticator singleton (useful for testing)."""
    global _authenticator_instance
    _authenticator_instance = None
