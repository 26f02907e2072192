"""Tests for the fetch-and-submit workflow."""

from unittest.mock import MagicMock

import pytest

from switchboard_updater.agents.submission_agent import OracleUpdateSubmitter
from switchboard_updater.schemas.schemas import OracleUpdateBatch, TransactionHandle
from switchboard_updater.services.blockchain_service import BlockchainService
from switchboard_updater.services.crossbar_service import CrossbarService
from switchboard_updater.utils.exceptions import (
    ConfirmationTimeout,
    DeserializationError,
    NetworkError,
)

from .conftest import CONTRACT_ADDRESS, FEED_ID, relay_response, relay_session


@pytest.fixture
def crossbar(relay_payload):
    crossbar = MagicMock()
    crossbar.fetch_updates.return_value = OracleUpdateBatch.model_validate(relay_payload)
    return crossbar


@pytest.fixture
def blockchain():
    blockchain = MagicMock()
    blockchain.chain_id = 421614
    blockchain.get_aggregator_id.return_value = FEED_ID
    blockchain.submit_updates.return_value = TransactionHandle(
        tx_hash="0x" + "12" * 32, chain_id=421614, feed_id=FEED_ID
    )
    return blockchain


class TestFeedIdResolution:
    def test_explicit_feed_id_skips_contract(self, crossbar, blockchain):
        submitter = OracleUpdateSubmitter(crossbar, blockchain)

        assert submitter.resolve_feed_id("0x01") == "0x01"
        blockchain.get_aggregator_id.assert_not_called()

    def test_aggregator_id_used_verbatim(self, crossbar, blockchain):
        submitter = OracleUpdateSubmitter(crossbar, blockchain)

        submitter.submit()

        blockchain.get_aggregator_id.assert_called_once_with()
        crossbar.fetch_updates.assert_called_once_with(421614, FEED_ID)


class TestSubmit:
    def test_encoded_passed_exactly_in_order(self, crossbar, blockchain):
        submitter = OracleUpdateSubmitter(crossbar, blockchain, wait_for_confirmation=False, timeout=45)

        handle = submitter.submit(FEED_ID)

        blockchain.submit_updates.assert_called_once_with(
            ["0xdead", "0xbeef"],
            wait_for_confirmation=False,
            timeout=45,
            feed_id=FEED_ID,
        )
        assert handle is blockchain.submit_updates.return_value

    def test_call_overrides_defaults(self, crossbar, blockchain):
        submitter = OracleUpdateSubmitter(crossbar, blockchain, wait_for_confirmation=False)

        submitter.submit(FEED_ID, wait_for_confirmation=True, timeout=10)

        _, kwargs = blockchain.submit_updates.call_args
        assert kwargs["wait_for_confirmation"] is True
        assert kwargs["timeout"] == 10

    def test_deserialization_error_aborts_before_contract_call(self, crossbar, blockchain):
        crossbar.fetch_updates.side_effect = DeserializationError("missing encoded")
        submitter = OracleUpdateSubmitter(crossbar, blockchain)

        with pytest.raises(DeserializationError):
            submitter.submit(FEED_ID)

        blockchain.submit_updates.assert_not_called()

    def test_relay_unreachable_propagates(self, crossbar, blockchain):
        crossbar.fetch_updates.side_effect = NetworkError("relay down")
        submitter = OracleUpdateSubmitter(crossbar, blockchain)

        with pytest.raises(NetworkError):
            submitter.submit(FEED_ID)

        blockchain.submit_updates.assert_not_called()

    def test_confirmation_timeout_propagates(self, crossbar, blockchain):
        blockchain.submit_updates.side_effect = ConfirmationTimeout("0x12", 120)
        submitter = OracleUpdateSubmitter(crossbar, blockchain)

        with pytest.raises(ConfirmationTimeout):
            submitter.submit(FEED_ID)

    def test_fetch_updates_does_not_submit(self, crossbar, blockchain):
        submitter = OracleUpdateSubmitter(crossbar, blockchain)

        batch = submitter.fetch_updates()

        assert batch.encoded == ["0xdead", "0xbeef"]
        blockchain.submit_updates.assert_not_called()


class TestEndToEnd:
    def test_relay_to_contract(self, network, w3, signer):
        session = relay_session(relay_response({"encoded": ["0xdead"], "results": []}))
        crossbar = CrossbarService(network.relay_url, session=session)
        blockchain = BlockchainService(network, CONTRACT_ADDRESS, signer=signer, w3=w3)
        submitter = OracleUpdateSubmitter(crossbar, blockchain)

        handle = submitter.submit()

        session.get.assert_called_once_with(
            f"https://crossbar.switchboard.xyz/updates/evm/421614/{FEED_ID}",
            timeout=15,
        )
        get_feed_data = w3.eth.contract.return_value.functions.getFeedData
        get_feed_data.assert_called_once_with([b"\xde\xad"])
        w3.eth.send_raw_transaction.assert_called_once()
        assert handle.confirmed is True
        assert handle.feed_id == FEED_ID
