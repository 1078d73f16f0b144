"""Stateless session tickets.

A ticket binds a random session id and PRNG seed to a player name with
HMAC-SHA256. Nothing is stored server side: the tag itself proves the seed
was issued by us for that name.
"""
import hashlib
import hmac
import re
import secrets
from dataclasses import dataclass, asdict

from .errors import ConfigurationError

__all__ = ["SessionTicket", "TicketAuthority", "sanitize_name"]

NAME_MAX_LEN = 16
DEFAULT_NAME = 'anon'
_NAME_DISALLOWED = re.compile(r'[^a-zA-Z0-9 _.-]')


def sanitize_name(raw) -> str:
    name = _NAME_DISALLOWED.sub('', str(raw or DEFAULT_NAME)).strip()[:NAME_MAX_LEN]
    return name or DEFAULT_NAME


@dataclass(frozen=True)
class SessionTicket:
    sessionId: str
    seed: int
    sig: str

    def to_dict(self) -> dict:
        return asdict(self)


class TicketAuthority:
    """Issues and checks tickets with a server-held secret."""

    def __init__(self, secret: str):
        if not secret:
            raise ConfigurationError('SESSION_HMAC_SECRET is not configured')
        self._key = secret.encode()

    def sign(self, session_id: str, seed: int, name: str) -> str:
        msg = f"{session_id}:{seed}:{name}"
        return hmac.new(self._key, msg.encode(), hashlib.sha256).hexdigest()

    def issue(self, name: str) -> SessionTicket:
        session_id = secrets.token_hex(16)
        seed = int.from_bytes(secrets.token_bytes(4), 'little')
        return SessionTicket(sessionId=session_id, seed=seed, sig=self.sign(session_id, seed, name))

    def verify(self, session_id: str, seed: int, name: str, signature: str) -> bool:
        if not session_id or not signature:
            return False
        expected = self.sign(session_id, seed, name)
        return hmac.compare_digest(expected.encode(), signature.encode())
