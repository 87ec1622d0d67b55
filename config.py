"""
Configuration management for VisionLens.

Loads environment variables from .env file and provides typed access to configuration.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)


class Config:
    """Configuration class for VisionLens."""

    # API Configuration
    API_PORT = int(os.getenv("API_PORT", "8000"))

    # Inference Backend Configuration
    INFERENCE_BACKEND = os.getenv("INFERENCE_BACKEND", "ollama")
    OLLAMA_BASE_URL = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")

    # Environment
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def validate(cls) -> bool:
        """Validate that configuration values are usable."""
        if cls.INFERENCE_BACKEND not in ("ollama", "stub"):
            return False
        return cls.OLLAMA_BASE_URL.startswith(("http://", "https://"))


if __name__ == "__main__":
    # Test configuration loading
    print("Configuration loaded:")
    print(f"  API Port: {Config.API_PORT}")
    print(f"  Inference Backend: {Config.INFERENCE_BACKEND}")
    print(f"  Ollama URL: {Config.OLLAMA_BASE_URL}")
    print(f"  Environment: {Config.ENVIRONMENT}")
    print(f"\n  Validation: {'✓ PASSED' if Config.validate() else '✗ FAILED'}")
