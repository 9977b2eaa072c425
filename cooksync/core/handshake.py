"""Browser authorization with short-poll token retrieval."""

import time
import webbrowser
from enum import Enum
from typing import Callable

from loguru import logger

from .client import CooksyncClient, ServiceError, TransportError
from .credentials import CredentialStore
from .notifier import Notifier

MAX_TOKEN_ATTEMPTS = 51
POLL_INTERVAL_SECONDS = 3.0


class AuthOutcome(Enum):
    """How a handshake ended."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


class AuthHandshake:
    """Turns an anonymous client into an authenticated one.

    Opens the authorization page once, then polls the token endpoint until
    the user finishes in the browser, the service errors out, or the
    attempt ceiling is reached.
    """

    def __init__(
        self,
        client: CooksyncClient,
        credentials: CredentialStore,
        notifier: Notifier,
        open_browser: Callable[[str], bool] = webbrowser.open,
        sleep: Callable[[float], None] = time.sleep,
        max_attempts: int = MAX_TOKEN_ATTEMPTS,
        poll_interval: float = POLL_INTERVAL_SECONDS,
    ) -> None:
        self.client = client
        self.credentials = credentials
        self.notifier = notifier
        self.open_browser = open_browser
        self.sleep = sleep
        self.max_attempts = max_attempts
        self.poll_interval = poll_interval

    def _open_authorization_page(self, client_id: str) -> None:
        url = self.client.authorize_url(client_id)
        logger.debug(f"Authorization URL: {url}")
        try:
            opened = self.open_browser(url)
        except webbrowser.Error as e:
            logger.debug(f"Failed to open browser: {e}")
            opened = False
        if not opened:
            self.notifier.notify(f"Open this URL in your browser to connect Cooksync: {url}")

    def run(self) -> AuthOutcome:
        """Run the handshake to completion."""
        client_id = self.credentials.get_client_id()

        for attempt in range(self.max_attempts):
            if attempt == 0:
                self._open_authorization_page(client_id)

            try:
                token = self.client.fetch_token(client_id)
            except TransportError as e:
                logger.warning(f"Token request failed: {e}")
                self.notifier.notify("Authorization failed. Please try again")
                return AuthOutcome.FAILED
            except ServiceError as e:
                logger.warning(f"Bad response from token endpoint ({e.status_code}): {e}")
                self.notifier.notify("Authorization failed. Please try again")
                return AuthOutcome.FAILED

            if token:
                self.credentials.store_token(token)
                logger.info("Received Cooksync token")
                return AuthOutcome.SUCCEEDED

            if attempt + 1 < self.max_attempts:
                logger.debug(f"No token yet, retrying (attempt {attempt + 1})")
                self.sleep(self.poll_interval)

        logger.warning(f"No token after {self.max_attempts} attempts, giving up")
        self.notifier.notify("Authorization timed out. Please try connecting again")
        return AuthOutcome.TIMED_OUT
