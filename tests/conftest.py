"""Pytest configuration and fixtures for switchboard_updater testing."""

from unittest.mock import MagicMock, Mock

import pytest
from hexbytes import HexBytes

from switchboard_updater.utils.config import NETWORKS

CONTRACT_ADDRESS = "0x4ED8171dB9eC85ee785e34AFBeFcAB539dbE2790"
SIGNER_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
FEED_ID = "0x" + "ab" * 32
TX_HASH = HexBytes("0x" + "12" * 32)


@pytest.fixture
def network():
    """Arbitrum Sepolia, the default target."""
    return NETWORKS["arbitrum-sepolia"]


@pytest.fixture
def signer():
    """Signer double returning fixed raw bytes."""
    signer = Mock()
    signer.address = SIGNER_ADDRESS
    signer.sign_transaction.return_value = b"\x02signed"
    return signer


@pytest.fixture
def w3():
    """Web3 double with a mined, successful receipt."""
    w3 = MagicMock()
    w3.eth.get_transaction_count.return_value = 7
    w3.eth.send_raw_transaction.return_value = TX_HASH
    w3.eth.wait_for_transaction_receipt.return_value = {
        "status": 1,
        "blockNumber": 1234,
        "gasUsed": 85000,
    }
    contract = w3.eth.contract.return_value
    contract.functions.aggregatorId.return_value.call.return_value = bytes.fromhex("ab" * 32)
    contract.functions.getFeedData.return_value.build_transaction.return_value = {
        "from": SIGNER_ADDRESS,
        "to": CONTRACT_ADDRESS,
        "data": "0xdeadbeef",
        "value": 0,
        "nonce": 7,
        "chainId": 421614,
        "gas": 120000,
    }
    return w3


@pytest.fixture
def relay_payload():
    """A trimmed Crossbar response with one successful and one failed report."""
    return {
        "encoded": ["0xdead", "0xbeef"],
        "results": [
            {
                "oracle_pubkey": "oracle-1",
                "queue_pubkey": "queue-1",
                "oracle_signing_pubkey": "0x" + "01" * 20,
                "feed_hash": FEED_ID,
                "recent_hash": "0x" + "cd" * 32,
                "failure_error": "",
                "success_value": "64123450000000000000000",
                "msg": "0x00",
                "signature": "c2lnbmF0dXJl",
                "recovery_id": 1,
                "recent_successes_if_failed": [],
                "timestamp": 1727000000,
                "result": 64123.45,
            },
            {
                "oracle_pubkey": "oracle-2",
                "failure_error": "price source timed out",
                "success_value": "",
                "recent_successes_if_failed": [
                    {"oracle_pubkey": "oracle-2", "success_value": "64100000000000000000000"}
                ],
            },
        ],
    }


def relay_response(payload=None, status_code=200, json_error=None):
    """Build a requests.Response double."""
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = "" if payload is None else str(payload)
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


def relay_session(response):
    session = MagicMock()
    session.headers = {}
    session.get.return_value = response
    return session
