import os

from switchboard_updater.agents.submission_agent import OracleUpdateSubmitter
from switchboard_updater.services.blockchain_service import BlockchainService
from switchboard_updater.services.crossbar_service import CrossbarService
from switchboard_updater.utils.config import Config
from switchboard_updater.utils.credentials import (
    EnvKeySource,
    FileKeySource,
    RemoteSigner,
    load_signer,
)


def build_signer(key_file=None, key_env=None, remote_signer=None, remote_address=None):
    """
    Pick a signer. Explicit arguments win over configuration; within each,
    the order is remote signer, environment variable, key file.
    """
    if remote_signer:
        return RemoteSigner(remote_signer, remote_address or Config.REMOTE_SIGNER_ADDRESS)
    if key_env:
        return load_signer(EnvKeySource(key_env))
    if key_file:
        return load_signer(FileKeySource(key_file))

    if Config.REMOTE_SIGNER_URL:
        return RemoteSigner(Config.REMOTE_SIGNER_URL, Config.REMOTE_SIGNER_ADDRESS)
    if os.getenv(Config.PRIVATE_KEY_ENV):
        return load_signer(EnvKeySource(Config.PRIVATE_KEY_ENV))
    return load_signer(FileKeySource(Config.SECRET_FILE))


def build_submitter(
    network=None,
    rpc_url=None,
    relay_url=None,
    contract_address=None,
    signer=None,
    wait_for_confirmation=None,
    timeout=None,
    value_wei=None,
):
    """Wire relay client, chain client and submitter from config plus overrides"""
    target = Config.network_target(network, rpc_url=rpc_url, relay_url=relay_url)

    crossbar = CrossbarService(target.relay_url, timeout=Config.RELAY_TIMEOUT)
    blockchain = BlockchainService(
        target,
        contract_address or Config.CONTRACT_ADDRESS,
        signer=signer,
        value_wei=Config.TX_VALUE_WEI if value_wei is None else value_wei,
    )

    return OracleUpdateSubmitter(
        crossbar,
        blockchain,
        wait_for_confirmation=(
            Config.WAIT_FOR_CONFIRMATION if wait_for_confirmation is None
            else wait_for_confirmation
        ),
        timeout=Config.CONFIRMATION_TIMEOUT if timeout is None else timeout,
    )
