"""Who is signed in. Authentication itself happens in the external identity provider."""

from typing import Optional

from flask import has_request_context, session


class Identity:
    def current_user_id(self) -> Optional[str]:
        raise NotImplementedError


class StaticIdentity(Identity):
    """Fixed identity for scripts and tests; None means signed out."""

    def __init__(self, uid: Optional[str] = None):
        self.uid = uid

    def current_user_id(self) -> Optional[str]:
        return self.uid


class SessionIdentity(Identity):
    """Reads the uid the identity provider callback stored in the Flask session."""

    def current_user_id(self) -> Optional[str]:
        if not has_request_context():
            return None
        return session.get("uid")
