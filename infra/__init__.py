"""
Infrastructure module exports.

Configuration and bootstrap for the inference backend and orchestrator.
"""

from .config import InfraConfig, get_config, InferenceBackendType
from .bootstrap import InfraBootstrap, bootstrap_infrastructure

__all__ = [
    "InfraConfig",
    "get_config",
    "InferenceBackendType",
    "InfraBootstrap",
    "bootstrap_infrastructure",
]
