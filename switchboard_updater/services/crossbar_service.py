import logging

import requests
from pydantic import ValidationError

from switchboard_updater.schemas.schemas import OracleUpdateBatch
from switchboard_updater.utils.exceptions import (
    DeserializationError,
    NetworkError,
    RelayResponseError,
)

logger = logging.getLogger(__name__)


class CrossbarService:
    """
    Client for the Switchboard Crossbar relay.

    Crossbar aggregates signed oracle observations and serves them as
    ready-to-submit update blobs:

      GET {base_url}/updates/evm/{chain_id}/{feed_id}
        -> {"encoded": ["0x..."], "results": [OracleReport, ...]}

    Only ``encoded`` is needed to update a contract; ``results`` is kept for
    callers who want to inspect the individual oracle reports.
    """

    def __init__(self, base_url, timeout=15, session=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        self.session = session or requests.Session()
        self.session.headers["Accept"] = "application/json"

        logger.debug(f"Crossbar relay: {self.base_url}")

    def updates_url(self, chain_id, feed_id):
        return f"{self.base_url}/updates/evm/{chain_id}/{feed_id}"

    def fetch_updates(self, chain_id, feed_id) -> OracleUpdateBatch:
        """Fetch the encoded updates for a feed on the given chain."""
        url = self.updates_url(chain_id, feed_id)
        logger.info(f"Fetching updates from {url}")

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise NetworkError(f"Relay request timed out: {url}") from e
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Could not reach relay at {url}: {e}") from e

        if not response.ok:
            raise RelayResponseError(
                response.status_code,
                f"Relay returned status {response.status_code}: {response.text[:200]}",
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise DeserializationError(f"Relay response is not valid JSON: {e}") from e

        try:
            batch = OracleUpdateBatch.model_validate(payload)
        except ValidationError as e:
            raise DeserializationError(f"Malformed relay response: {e}") from e

        logger.info(
            f"Received {len(batch.encoded)} encoded update(s), "
            f"{len(batch.results)} oracle report(s)"
        )
        return batch
