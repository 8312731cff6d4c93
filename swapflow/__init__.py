"""swapflow - approve, swap on Uniswap V3, and deposit into a Balancer pool."""

from swapflow.config import PipelineConfig, Settings
from swapflow.models.pipeline import PipelineResult, PipelineStage
from swapflow.orchestrator import Orchestrator

__version__ = "0.1.0"
__all__ = [
    "Orchestrator",
    "PipelineConfig",
    "PipelineResult",
    "PipelineStage",
    "Settings",
    "__version__",
]
