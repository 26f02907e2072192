"""Exceptions raised by the fetch-and-submit workflow."""


class UpdaterError(Exception):
    """Base exception for oracle update errors."""

    pass


class NetworkError(UpdaterError):
    """Raised when the relay or the RPC endpoint cannot be reached."""

    pass


class RelayResponseError(NetworkError):
    """Raised when the relay answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code


class DeserializationError(UpdaterError):
    """Raised when the relay body is not a valid update batch."""

    pass


class SigningKeyError(UpdaterError):
    """Raised when key material is missing, unreadable or invalid."""

    pass


class ContractCallError(UpdaterError):
    """Raised when a contract call reverts or is rejected by the node."""

    pass


class ConfirmationTimeout(UpdaterError):
    """Raised when a submitted transaction is not mined in time."""

    def __init__(self, tx_hash: str, timeout: float) -> None:
        super().__init__(
            f"Transaction {tx_hash} not included after {timeout} seconds"
        )
        self.tx_hash = tx_hash
        self.timeout = timeout
