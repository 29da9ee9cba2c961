"""Dashboard state owned by a single controller object."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Sequence

from .core.metrics import Token
from .core.portfolio import Portfolio


@dataclass
class DashboardState:
    source: str
    tokens: tuple[Token, ...] = ()
    last_updated: Optional[datetime] = None
    last_error: Optional[str] = None
    refresh_count: int = 0
    portfolio: Portfolio = field(default_factory=Portfolio)

    @property
    def ready(self) -> bool:
        return self.last_updated is not None

    def replace_tokens(self, tokens: Sequence[Token], ts: datetime) -> None:
        self.tokens = tuple(tokens)
        self.last_updated = ts
        self.last_error = None
        self.refresh_count += 1

    def record_error(self, message: str) -> None:
        self.last_error = message

    def find_token(self, token_id: object) -> Optional[Token]:
        """Look up a token by id; string and integer ids compare by text."""

        wanted = str(token_id)
        for token in self.tokens:
            if str(token.id) == wanted:
                return token
        return None

    def health(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "ready": self.ready,
            "tokens": len(self.tokens),
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
            "last_error": self.last_error,
            "refresh_count": self.refresh_count,
            "holdings": len(self.portfolio),
        }
