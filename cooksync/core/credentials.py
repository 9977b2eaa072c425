"""Bearer token and per-installation client id."""

import secrets
import string

from loguru import logger

from .state import SyncState
from .storage import LocalStorage

CLIENT_ID_KEY = "cooksync-client-id"
CLIENT_ID_LENGTH = 13


class CredentialStore:
    """Hands out the credentials outbound requests need."""

    def __init__(self, state: SyncState, storage: LocalStorage) -> None:
        """Initialize credential store.

        Args:
            state: Sync state holding the bearer token
            storage: Device-scoped storage holding the client id
        """
        self.state = state
        self.storage = storage
        self._client_id: str | None = None

    def _generate_client_id(self, length: int = CLIENT_ID_LENGTH) -> str:
        """Generate a random lowercase alphanumeric id."""
        chars = string.ascii_lowercase + string.digits
        return "".join(secrets.choice(chars) for _ in range(length))

    def get_client_id(self) -> str:
        """Return the installation's client id, creating it on first use."""
        if self._client_id:
            return self._client_id

        client_id = self.storage.get_item(CLIENT_ID_KEY)
        if not client_id:
            client_id = self._generate_client_id()
            self.storage.set_item(CLIENT_ID_KEY, client_id)
            logger.info(f"Generated new client id {client_id}")

        self._client_id = client_id
        return client_id

    @property
    def token(self) -> str:
        return self.state.state.token

    def has_token(self) -> bool:
        return bool(self.token)

    def store_token(self, token: str) -> None:
        self.state.set_token(token)

    def get_auth_headers(self) -> dict[str, str]:
        """Headers for authenticated requests."""
        return {
            "Authorization": f"Bearer {self.token}",
            "Client-Id": self.get_client_id(),
        }
