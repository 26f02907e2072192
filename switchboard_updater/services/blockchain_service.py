import base64
import binascii
import logging
import re

import requests
from hexbytes import HexBytes
from web3 import Web3
from web3.exceptions import ContractLogicError, TimeExhausted, Web3Exception
from web3.middleware import ExtraDataToPOAMiddleware

from switchboard_updater.schemas.schemas import TransactionHandle
from switchboard_updater.utils.exceptions import (
    ConfirmationTimeout,
    ContractCallError,
    NetworkError,
    SigningKeyError,
)

logger = logging.getLogger(__name__)

# getFeedData(bytes[] calldata updates) public payable
# aggregatorId() public view returns (bytes32)
FEED_CONSUMER_ABI = [
    {
        "inputs": [
            {"internalType": "bytes[]", "name": "updates", "type": "bytes[]"}
        ],
        "name": "getFeedData",
        "outputs": [],
        "stateMutability": "payable",
        "type": "function"
    },
    {
        "inputs": [],
        "name": "aggregatorId",
        "outputs": [
            {"internalType": "bytes32", "name": "", "type": "bytes32"}
        ],
        "stateMutability": "view",
        "type": "function"
    }
]

_TRANSPORT_ERRORS = (
    requests.exceptions.ConnectionError,
    requests.exceptions.Timeout,
)

_BARE_HEX = re.compile(r"^(?:[0-9a-fA-F]{2})+$")


def decode_update(update):
    """
    Turn a relay update blob into bytes.

    0x-prefixed strings and bare even-length hex strings are hex; anything
    else is base64. Hex wins when a string would be valid as both.
    """
    if isinstance(update, (bytes, bytearray)):
        return bytes(update)
    try:
        if update.startswith(("0x", "0X")) or _BARE_HEX.match(update):
            return bytes(HexBytes(update))
        return base64.b64decode(update, validate=True)
    except (ValueError, binascii.Error) as e:
        raise ContractCallError(f"Update is neither hex nor base64: {update[:20]}...") from e


class BlockchainService:
    def __init__(self, network, contract_address, signer=None, w3=None, value_wei=0):
        self.network = network
        self.signer = signer
        self.value_wei = value_wei

        if w3 is None:
            w3 = Web3(Web3.HTTPProvider(network.rpc_url))
            if network.poa:
                w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)
        self.w3 = w3

        self.contract_address = Web3.to_checksum_address(contract_address)
        self.contract = self.w3.eth.contract(
            address=self.contract_address,
            abi=FEED_CONSUMER_ABI
        )

        logger.info(f"Network: {network.name} (chain {network.chain_id})")
        logger.info(f"Contract: {self.contract_address}")
        if signer is not None:
            logger.info(f"Signer: {signer.address}")

    @property
    def chain_id(self):
        return self.network.chain_id

    def is_connected(self):
        return self.w3.is_connected()

    def get_aggregator_id(self):
        """Call aggregatorId() - free view call, no gas"""
        try:
            aggregator_id = self.contract.functions.aggregatorId().call()
        except ContractLogicError as e:
            raise ContractCallError(
                f"aggregatorId() reverted: {self._extract_revert_reason(e)}"
            ) from e
        except _TRANSPORT_ERRORS as e:
            raise NetworkError(f"RPC unreachable at {self.network.rpc_url}: {e}") from e
        except (Web3Exception, ValueError) as e:
            raise ContractCallError(f"aggregatorId() failed: {e}") from e

        feed_id = Web3.to_hex(aggregator_id)
        logger.info(f"Contract aggregator id: {feed_id}")
        return feed_id

    def submit_updates(self, updates, wait_for_confirmation=True, timeout=120, feed_id=None):
        """
        Submit encoded oracle updates via getFeedData(bytes[]).

        The transaction is signed by the configured signer; gas and fees are
        estimated by the node. When wait_for_confirmation is False the
        handle is returned as soon as the node accepts the transaction.
        """
        if self.signer is None:
            raise SigningKeyError("No signer configured for submission")

        payload = [decode_update(update) for update in updates]
        sender = self.signer.address

        logger.info(f"Submitting {len(payload)} update(s) to {self.contract_address}...")

        try:
            txn = self.contract.functions.getFeedData(payload).build_transaction({
                'from': sender,
                'nonce': self.w3.eth.get_transaction_count(sender),
                'value': self.value_wei,
                'chainId': self.network.chain_id,
            })
        except ContractLogicError as e:
            raise ContractCallError(
                f"getFeedData reverted: {self._extract_revert_reason(e)}"
            ) from e
        except _TRANSPORT_ERRORS as e:
            raise NetworkError(f"RPC unreachable at {self.network.rpc_url}: {e}") from e
        except (Web3Exception, ValueError) as e:
            raise ContractCallError(f"Could not build getFeedData transaction: {e}") from e

        raw = self.signer.sign_transaction(txn)

        try:
            tx_hash = self.w3.eth.send_raw_transaction(raw)
        except _TRANSPORT_ERRORS as e:
            raise NetworkError(f"RPC unreachable at {self.network.rpc_url}: {e}") from e
        except (Web3Exception, ValueError) as e:
            raise ContractCallError(f"Node rejected transaction: {e}") from e

        handle = TransactionHandle(
            tx_hash=Web3.to_hex(tx_hash),
            chain_id=self.network.chain_id,
            feed_id=feed_id,
        )
        logger.info(f"Transaction sent: {handle.tx_hash}")

        if not wait_for_confirmation:
            return handle

        logger.info("Waiting for confirmation...")
        try:
            receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout)
        except TimeExhausted as e:
            raise ConfirmationTimeout(handle.tx_hash, timeout) from e
        except _TRANSPORT_ERRORS as e:
            raise NetworkError(f"RPC unreachable at {self.network.rpc_url}: {e}") from e

        if receipt['status'] != 1:
            # Replay to get revert reason
            reason = "Transaction reverted on-chain"
            try:
                self.w3.eth.call(
                    {
                        'to': self.contract_address,
                        'from': sender,
                        'data': txn['data'],
                        'value': self.value_wei,
                    },
                    receipt['blockNumber']
                )
            except ContractLogicError as replay_err:
                reason = self._extract_revert_reason(replay_err)
            except (Web3Exception, ValueError, *_TRANSPORT_ERRORS) as replay_err:
                logger.warning(f"Could not replay {handle.tx_hash} for a revert reason: {replay_err}")
            raise ContractCallError(f"Transaction {handle.tx_hash} failed: {reason}")

        logger.info(f"Confirmed in block {receipt['blockNumber']}, gas used: {receipt['gasUsed']}")

        return handle.model_copy(update={
            'confirmed': True,
            'block_number': receipt['blockNumber'],
            'gas_used': receipt['gasUsed'],
            'status': receipt['status'],
        })

    def _extract_revert_reason(self, error):
        """Extract human-readable revert reason from a web3 ContractLogicError."""
        msg = getattr(error, 'message', None) or str(error)
        # web3.py returns 'execution reverted: <reason>'
        if 'execution reverted:' in msg:
            return msg.split('execution reverted:')[-1].strip().strip("'\"")
        return msg
