import os
from dataclasses import dataclass, replace
from dotenv import load_dotenv

load_dotenv()

CROSSBAR_URL = 'https://crossbar.switchboard.xyz'


@dataclass(frozen=True)
class NetworkTarget:
    """A chain the updater knows how to reach"""
    name: str
    chain_id: int
    rpc_url: str
    relay_url: str = CROSSBAR_URL
    poa: bool = False


NETWORKS = {
    'arbitrum-sepolia': NetworkTarget(
        name='arbitrum-sepolia',
        chain_id=421614,
        rpc_url='https://sepolia-rollup.arbitrum.io/rpc',
    ),
    'morph-holesky': NetworkTarget(
        name='morph-holesky',
        chain_id=2810,
        rpc_url='https://rpc-holesky.morphl2.io',
    ),
    'core-testnet': NetworkTarget(
        name='core-testnet',
        chain_id=1115,
        rpc_url='https://rpc.test.btcs.network',
        poa=True,
    ),
    'core-mainnet': NetworkTarget(
        name='core-mainnet',
        chain_id=1116,
        rpc_url='https://rpc.coredao.org',
        poa=True,
    ),
}


def _env_flag(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    # Network
    NETWORK = os.getenv('NETWORK', 'arbitrum-sepolia')
    RPC_URL = os.getenv('RPC_URL')
    CROSSBAR_URL = os.getenv('CROSSBAR_URL')

    # Target contract
    CONTRACT_ADDRESS = os.getenv(
        'CONTRACT_ADDRESS',
        '0x4ED8171dB9eC85ee785e34AFBeFcAB539dbE2790'
    )
    FEED_ID = os.getenv('FEED_ID')

    # Key material
    SECRET_FILE = os.getenv('SECRET_FILE', '.secret')
    PRIVATE_KEY_ENV = 'PRIVATE_KEY'
    REMOTE_SIGNER_URL = os.getenv('REMOTE_SIGNER_URL')
    REMOTE_SIGNER_ADDRESS = os.getenv('REMOTE_SIGNER_ADDRESS')

    # Submission
    WAIT_FOR_CONFIRMATION = _env_flag('WAIT_FOR_CONFIRMATION', True)
    CONFIRMATION_TIMEOUT = float(os.getenv('CONFIRMATION_TIMEOUT', '120'))
    RELAY_TIMEOUT = float(os.getenv('RELAY_TIMEOUT', '15'))
    TX_VALUE_WEI = int(os.getenv('TX_VALUE_WEI', '0'))

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    @classmethod
    def network_target(cls, name=None, rpc_url=None, relay_url=None):
        """Resolve a network by name, applying RPC and relay overrides"""
        name = name or cls.NETWORK
        if name not in NETWORKS:
            known = ', '.join(sorted(NETWORKS))
            raise ValueError(f"Unknown network '{name}' (known: {known})")

        target = NETWORKS[name]
        overrides = {}
        if rpc_url or cls.RPC_URL:
            overrides['rpc_url'] = rpc_url or cls.RPC_URL
        if relay_url or cls.CROSSBAR_URL:
            overrides['relay_url'] = (relay_url or cls.CROSSBAR_URL).rstrip('/')
        return replace(target, **overrides) if overrides else target

    @classmethod
    def validate(cls):
        """Validate all required config is present"""
        required = [
            'NETWORK',
            'CONTRACT_ADDRESS',
        ]

        missing = [key for key in required if not getattr(cls, key)]

        if missing:
            raise ValueError(f"Missing required config: {', '.join(missing)}")

        if cls.NETWORK not in NETWORKS:
            raise ValueError(f"Unknown network: {cls.NETWORK}")
        if cls.CONFIRMATION_TIMEOUT <= 0:
            raise ValueError("CONFIRMATION_TIMEOUT must be positive")
