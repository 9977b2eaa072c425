"""Export requests against the recipe service."""

from loguru import logger

from ..models.recipe import ExportManifest, MalformedRecipeError
from .client import CONNECTION_ERROR_MESSAGE, CooksyncClient, ServiceError, TransportError
from .credentials import CredentialStore


class ExportFailedError(Exception):
    """The export could not be obtained; the message is meant for the user."""


class ExportRequester:
    """Asks the service for recipes the client has not imported yet."""

    def __init__(self, client: CooksyncClient, credentials: CredentialStore) -> None:
        self.client = client
        self.credentials = credentials

    def request_export(self, known_ids: set[int]) -> ExportManifest | None:
        """Request the export manifest.

        The full set of imported ids is sent instead of a timestamp, so
        repeating the request is harmless and clock skew does not matter.

        Returns:
            The manifest, or None when the client is already up to date

        Raises:
            ExportFailedError: On service errors or connectivity problems
        """
        try:
            payload = self.client.request_export(known_ids, self.credentials.get_auth_headers())
        except TransportError as e:
            logger.warning(f"Export request failed: {e}")
            raise ExportFailedError(CONNECTION_ERROR_MESSAGE) from e
        except ServiceError as e:
            logger.warning(f"Bad response from export endpoint ({e.status_code}): {e}")
            raise ExportFailedError(str(e)) from e

        if not payload:
            return None

        try:
            manifest = ExportManifest.from_payload(payload)
        except MalformedRecipeError as e:
            raise ExportFailedError(f"Unexpected export response: {e}") from e

        if not manifest.recipes and not manifest.rejected:
            # Metadata without records, e.g. {"latest_id": 3, "status": "done"}
            logger.info(f"Export returned no records (status={manifest.status})")
            return None

        logger.info(
            f"Export manifest: {len(manifest)} recipes "
            f"(latest_id={manifest.latest_id}, status={manifest.status})"
        )
        return manifest
