import logging

from fastapi import APIRouter, HTTPException
from switchboard_updater.schemas.schemas import (
    FeedIdResponse,
    HealthResponse,
    NetworkResponse,
    OracleUpdateBatch,
    SubmitUpdateRequest,
    TransactionHandle,
)
from switchboard_updater.utils.config import NETWORKS, Config
from switchboard_updater.utils.exceptions import (
    ConfirmationTimeout,
    ContractCallError,
    DeserializationError,
    NetworkError,
    UpdaterError,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Will be injected from main.py
submitter = None


def _http_error(error: UpdaterError) -> HTTPException:
    """Map a workflow error to the HTTP status the caller should see"""
    if isinstance(error, (NetworkError, DeserializationError)):
        status = 502
    elif isinstance(error, ContractCallError):
        status = 422
    elif isinstance(error, ConfirmationTimeout):
        status = 504
    else:
        status = 500
    logger.error(f"Request failed ({status}): {error}")
    return HTTPException(status_code=status, detail=str(error))

# ============================================================================
# HEALTH & INFO
# ============================================================================

@router.get("/health", response_model=HealthResponse)
def health_check():
    """Health check endpoint"""
    blockchain = submitter.blockchain
    signer = blockchain.signer
    return HealthResponse(
        status="healthy",
        rpc_connected=blockchain.is_connected(),
        network=blockchain.network.name,
        chain_id=blockchain.chain_id,
        signer_address=signer.address if signer else None,
    )

@router.get("/networks", response_model=list[NetworkResponse])
def list_networks():
    return [
        NetworkResponse(
            name=target.name,
            chain_id=target.chain_id,
            rpc_url=target.rpc_url,
            relay_url=target.relay_url,
        )
        for target in NETWORKS.values()
    ]

# ============================================================================
# FEEDS & UPDATES
# ============================================================================

@router.get("/feed-id", response_model=FeedIdResponse)
def feed_id():
    """The aggregatorId the configured contract consumes"""
    try:
        resolved = submitter.resolve_feed_id(Config.FEED_ID)
    except UpdaterError as e:
        raise _http_error(e)
    return FeedIdResponse(
        contract_address=submitter.blockchain.contract_address,
        feed_id=resolved,
    )

@router.get("/updates/{feed_id}", response_model=OracleUpdateBatch)
def preview_updates(feed_id: str):
    """Fetch the relay's current update batch without submitting it"""
    try:
        return submitter.fetch_updates(feed_id)
    except UpdaterError as e:
        raise _http_error(e)

@router.post("/updates", response_model=TransactionHandle)
def submit_updates(request: SubmitUpdateRequest):
    """
    Fetch the latest updates for a feed and submit them to the contract.
    Without a feed_id the contract's own aggregatorId is used.
    """
    try:
        return submitter.submit(
            request.feed_id or Config.FEED_ID,
            wait_for_confirmation=request.wait_for_confirmation,
        )
    except UpdaterError as e:
        raise _http_error(e)
