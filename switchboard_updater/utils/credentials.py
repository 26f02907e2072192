"""Key material sources and transaction signers.

The workflow only needs something that can turn an unsigned transaction dict
into raw signed bytes. Where the key lives is decided here:

- ``FileKeySource`` reads a private key or mnemonic from a local file
  (``.secret`` by default)
- ``EnvKeySource`` reads it from an environment variable
- ``RemoteSigner`` never sees the key and asks an external signer
  (Clef, web3signer, a hardware-backed node) over ``eth_signTransaction``
"""

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path

from eth_account import Account
from web3 import Web3

from switchboard_updater.utils.exceptions import SigningKeyError

logger = logging.getLogger(__name__)

Account.enable_unaudited_hdwallet_features()


class KeySource(ABC):
    """Somewhere private key material can be read from"""

    @abstractmethod
    def read(self) -> str:
        ...

    @abstractmethod
    def describe(self) -> str:
        ...


class FileKeySource(KeySource):
    def __init__(self, path=".secret"):
        self.path = Path(path)

    def read(self) -> str:
        try:
            secret = self.path.read_text(encoding="utf-8").strip()
        except OSError as e:
            raise SigningKeyError(f"Cannot read key file {self.path}: {e}") from e

        if not secret:
            raise SigningKeyError(f"Key file {self.path} is empty")
        return secret

    def describe(self) -> str:
        return f"file:{self.path}"


class EnvKeySource(KeySource):
    def __init__(self, variable="PRIVATE_KEY"):
        self.variable = variable

    def read(self) -> str:
        secret = (os.getenv(self.variable) or "").strip()
        if not secret:
            raise SigningKeyError(f"Environment variable {self.variable} is not set")
        return secret

    def describe(self) -> str:
        return f"env:{self.variable}"


class TransactionSigner(ABC):
    """Signs transactions for a single account"""

    address: str

    @abstractmethod
    def sign_transaction(self, transaction: dict) -> bytes:
        """Return the raw signed transaction ready for eth_sendRawTransaction"""


class LocalAccountSigner(TransactionSigner):
    """Signs in-process with an eth-account LocalAccount"""

    def __init__(self, account):
        self.account = account
        self.address = account.address

    @classmethod
    def from_secret(cls, secret: str) -> "LocalAccountSigner":
        """Build a signer from a hex private key or a BIP-39 mnemonic"""
        secret = secret.strip()
        try:
            if len(secret.split()) > 1:
                account = Account.from_mnemonic(secret)
            else:
                account = Account.from_key(secret)
        except Exception as e:
            # eth-account raises a mix of ValueError, binascii.Error and
            # eth_keys ValidationError for malformed input
            raise SigningKeyError(f"Invalid key material: {e}") from e
        return cls(account)

    def sign_transaction(self, transaction: dict) -> bytes:
        signed = self.account.sign_transaction(transaction)
        return signed.raw_transaction


class RemoteSigner(TransactionSigner):
    """Delegates signing to an external JSON-RPC signer"""

    def __init__(self, url, address, w3=None):
        if not address:
            raise SigningKeyError("Remote signer requires an account address")
        self.url = url
        self.address = Web3.to_checksum_address(address)
        self.w3 = w3 or Web3(Web3.HTTPProvider(url))

    def sign_transaction(self, transaction: dict) -> bytes:
        try:
            signed = self.w3.eth.sign_transaction(transaction)
        except Exception as e:
            raise SigningKeyError(f"Remote signer at {self.url} refused: {e}") from e
        return bytes(signed.raw)


def load_signer(source: KeySource) -> LocalAccountSigner:
    """Read key material from a source and build a local signer"""
    signer = LocalAccountSigner.from_secret(source.read())
    logger.info(f"Loaded signer {signer.address} from {source.describe()}")
    return signer
