from __future__ import annotations

import logging
from collections.abc import Callable

from domain.models import Session, SessionState, User
from services.api import endpoints
from services.api.client import ApiClient
from services.api.errors import ApiError
from services.auth.gate import LOGIN_PATH
from services.auth.token_store import FileTokenStore

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Current identity for one app instance.

    UNKNOWN (loading) -> AUTHENTICATED | ANONYMOUS, decided once by `init()`.
    Only the token (and a user snapshot) is persisted; the state itself is
    re-derived from the token store on every fresh start.
    """

    def __init__(self, client: ApiClient, token_store: FileTokenStore, navigate: Callable[[str], None]):
        self.client = client
        self.token_store = token_store
        self.navigate = navigate
        self.state = SessionState.UNKNOWN
        self.user: User | None = None
        client.on_unauthorized = self.handle_unauthorized

    @property
    def loading(self) -> bool:
        return self.state == SessionState.UNKNOWN

    @property
    def session(self) -> Session | None:
        token = self.token_store.get_token()
        if self.state != SessionState.AUTHENTICATED or not self.user or not token:
            return None
        return Session(user=self.user, auth_token=token)

    def init(self) -> SessionState:
        if self.state != SessionState.UNKNOWN:
            return self.state
        return self._check()

    def refresh(self) -> SessionState:
        self.state = SessionState.UNKNOWN
        return self._check()

    def _check(self) -> SessionState:
        if not self.token_store.get_token():
            self._become_anonymous()
            return self.state
        try:
            user = endpoints.get_profile(self.client)
        except ApiError as e:
            logger.info("stored token rejected (%s); starting anonymous", e.message)
            self.token_store.clear()
            self._become_anonymous()
            return self.state
        logger.info("session restored for %s (%s)", user.email, user.role.value)
        self.user = user
        self.state = SessionState.AUTHENTICATED
        return self.state

    def _become_anonymous(self) -> None:
        self.user = None
        self.state = SessionState.ANONYMOUS

    def login(self, user: User) -> None:
        self.user = user
        self.state = SessionState.AUTHENTICATED

    def logout(self) -> None:
        logger.info("logout: %s", self.user.email if self.user else "-")
        self.token_store.clear()
        self._become_anonymous()
        self.navigate(LOGIN_PATH)

    def handle_unauthorized(self) -> None:
        # token is already cleared by the client
        self._become_anonymous()
        self.navigate(LOGIN_PATH)
