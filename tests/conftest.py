"""Pytest configuration and fixtures."""

import pytest
import structlog
from eth_account import Account
from eth_account.signers.local import LocalAccount

from swapflow.chain.mock import MockChainClient
from swapflow.config import PipelineConfig
from swapflow.orchestrator import Orchestrator
from tests.helpers import SIGNER_KEY, make_chain_client


@pytest.fixture
def signer() -> LocalAccount:
    """Deterministic signing account."""
    return Account.from_key(SIGNER_KEY)


@pytest.fixture
def config() -> PipelineConfig:
    """Default Sepolia pipeline config without explorer links."""
    return PipelineConfig(explorer_url=None)


@pytest.fixture
def client() -> MockChainClient:
    """Mock client with the USDC/LINK pool deployed."""
    return make_chain_client()


@pytest.fixture
def orchestrator(
    config: PipelineConfig, client: MockChainClient, signer: LocalAccount
) -> Orchestrator:
    return Orchestrator(config, client, signer)


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo structlog.configure() calls made by CLI tests."""
    yield
    structlog.reset_defaults()
