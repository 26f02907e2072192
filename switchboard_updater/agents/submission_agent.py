import logging

logger = logging.getLogger(__name__)


class OracleUpdateSubmitter:
    """Fetches encoded oracle updates from the relay and submits them on-chain"""

    def __init__(self, crossbar_service, blockchain_service, wait_for_confirmation=True, timeout=120):
        self.crossbar = crossbar_service
        self.blockchain = blockchain_service
        self.wait_for_confirmation = wait_for_confirmation
        self.timeout = timeout

    def resolve_feed_id(self, feed_id=None):
        """Use the given feed id, or ask the contract for its aggregatorId"""
        if feed_id:
            return feed_id
        return self.blockchain.get_aggregator_id()

    def fetch_updates(self, feed_id=None):
        feed_id = self.resolve_feed_id(feed_id)
        return self.crossbar.fetch_updates(self.blockchain.chain_id, feed_id)

    def submit(self, feed_id=None, wait_for_confirmation=None, timeout=None):
        """Fetch updates for a feed and push them to the contract"""
        if wait_for_confirmation is None:
            wait_for_confirmation = self.wait_for_confirmation
        if timeout is None:
            timeout = self.timeout

        feed_id = self.resolve_feed_id(feed_id)
        logger.info(f"Submission: updating feed {feed_id}")

        batch = self.crossbar.fetch_updates(self.blockchain.chain_id, feed_id)

        handle = self.blockchain.submit_updates(
            batch.encoded,
            wait_for_confirmation=wait_for_confirmation,
            timeout=timeout,
            feed_id=feed_id,
        )

        logger.info(f"Submission: done, tx {handle.tx_hash}")
        return handle
