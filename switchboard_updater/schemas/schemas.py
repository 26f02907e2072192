from pydantic import BaseModel, field_validator
from typing import Optional, List

# Relay models
class OracleReport(BaseModel):
    """One oracle's signed observation, as served by the relay"""
    oracle_pubkey: Optional[str] = None
    queue_pubkey: Optional[str] = None
    oracle_signing_pubkey: Optional[str] = None
    feed_hash: Optional[str] = None
    recent_hash: Optional[str] = None
    success_value: Optional[str] = None
    failure_error: Optional[str] = None
    msg: Optional[str] = None
    signature: Optional[str] = None
    recovery_id: Optional[int] = None
    recent_successes_if_failed: List["OracleReport"] = []
    timestamp: Optional[int] = None
    result: Optional[float] = None

    @field_validator('success_value', 'failure_error', mode='before')
    @classmethod
    def _blank_to_none(cls, value):
        # The relay sends "" for the outcome that did not happen
        if value == "":
            return None
        return value

    @property
    def succeeded(self) -> bool:
        return self.success_value is not None and self.failure_error is None

class OracleUpdateBatch(BaseModel):
    encoded: List[str]
    results: List[OracleReport] = []

# Transaction models
class TransactionHandle(BaseModel):
    tx_hash: str
    chain_id: int
    feed_id: Optional[str] = None
    confirmed: bool = False
    block_number: Optional[int] = None
    gas_used: Optional[int] = None
    status: Optional[int] = None

# Request Models
class SubmitUpdateRequest(BaseModel):
    feed_id: Optional[str] = None
    wait_for_confirmation: Optional[bool] = None

# Response Models
class NetworkResponse(BaseModel):
    name: str
    chain_id: int
    rpc_url: str
    relay_url: str

class FeedIdResponse(BaseModel):
    contract_address: str
    feed_id: str

class HealthResponse(BaseModel):
    status: str
    rpc_connected: bool
    network: str
    chain_id: int
    signer_address: Optional[str] = None
