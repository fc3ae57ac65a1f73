"""Static token authenticator: fixed token table for development and testing.

Tokens are configured as `token:principal_id:role` entries separated by
commas, e.g. `owner-token:u-1:owner,staff-token:u-2:staff`.
"""

from stockroom.auth.port import AuthenticatorPort, Principal


def parse_token_table(spec: str) -> dict[str, Principal]:
    table = {}
    for entry in (part.strip() for part in spec.split(",")):
        if not entry:
            continue
        token, sep, rest = entry.partition(":")
        principal_id, sep2, role = rest.partition(":")
        if not (sep and sep2 and token and principal_id and role):
            raise ValueError(f"Malformed auth token entry: {entry!r}")
        table[token] = Principal(id=principal_id, role=role.lower())
    return table


class StaticTokenAuthenticator(AuthenticatorPort):
    def __init__(self, tokens: dict[str, Principal] | None = None):
        self.tokens = dict(tokens or {})

    @classmethod
    def from_spec(cls, spec: str) -> "StaticTokenAuthenticator":
        return cls(parse_token_table(spec))

    def configure(self, token: str, principal_id: str, role: str) -> None:
        """Register a token for testing."""
        self.tokens[token] = Principal(id=principal_id, role=role)

    def authenticate(self, token: str) -> Principal | None:
        if not token:
            return None
        return self.tokens.get(token)
