"""Review session errors."""

from __future__ import annotations

from loreforge.domain.exceptions import LoreForgeError


class ReviewSessionClosedError(LoreForgeError):
    """Raised when a discarded or committed review session is used again."""

    def __init__(self, session_id: object, state: str) -> None:
        self.session_id = session_id
        self.state = state
        super().__init__(f"Review session {session_id} is {state}")
