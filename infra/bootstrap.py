"""
Infrastructure initialization and bootstrap.

Singleton pattern for creating the inference backend, the availability
monitor and the orchestrator from configuration.
"""

from typing import Optional

from inference import InferenceBackend
from orchestration import AvailabilityMonitor, TaskOrchestrator

from .config import InfraConfig, get_config


class InfraBootstrap:
    """
    Bootstrap infrastructure based on configuration.

    Singleton pattern - single instance per process.
    """

    _instance: Optional["InfraBootstrap"] = None

    def __init__(self, config: Optional[InfraConfig] = None):
        """Initialize bootstrap with configuration."""
        self.config = config or get_config()
        self.inference_backend = self.config.create_inference_client()
        self.monitor = AvailabilityMonitor(
            self.inference_backend, interval_s=self.config.availability_interval_s
        )
        self.orchestrator = TaskOrchestrator(self.inference_backend, monitor=self.monitor)

    @classmethod
    def get_instance(cls, config: Optional[InfraConfig] = None) -> "InfraBootstrap":
        """
        Get singleton instance.

        Args:
            config: Optional custom configuration (only used first time)

        Returns:
            Singleton InfraBootstrap instance
        """
        if cls._instance is None:
            cls._instance = cls(config)
        return cls._instance

    @classmethod
    def reset(cls):
        """Reset singleton (for testing)."""
        cls._instance = None

    def get_inference_backend(self) -> InferenceBackend:
        return self.inference_backend

    def get_monitor(self) -> AvailabilityMonitor:
        return self.monitor

    def get_orchestrator(self) -> TaskOrchestrator:
        return self.orchestrator

    async def shutdown(self) -> None:
        """Stop the monitor loop and close the inference client."""
        await self.monitor.stop()
        await self.inference_backend.aclose()

    def __repr__(self) -> str:
        """String representation showing configured backends."""
        return (
            f"InfraBootstrap(inference={self.config.inference_backend}, "
            f"url={self.config.ollama_base_url})"
        )


def bootstrap_infrastructure(config: Optional[InfraConfig] = None) -> InfraBootstrap:
    """
    Bootstrap all infrastructure backends.

    Args:
        config: Optional custom configuration

    Returns:
        InfraBootstrap instance with all backends initialized
    """
    return InfraBootstrap.get_instance(config)
