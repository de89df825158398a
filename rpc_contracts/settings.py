"""
Settings for the contract layer.
Externalizes config so the same service code runs unchanged across deployments.
"""
import os


class ContractSettings:
    """Contract layer settings with environment variable support."""

    def __init__(self):
        self.log_level: str = os.getenv("RPC_CONTRACTS_LOG_LEVEL", "INFO").upper()
        self.log_format: str = os.getenv(
            "RPC_CONTRACTS_LOG_FORMAT",
            "[%(call_id)s] %(name)s %(message)s",
        )
        # Debug-log every verified call (hot path, off by default)
        self.trace_calls: bool = os.getenv("RPC_CONTRACTS_TRACE_CALLS", "false").lower() == "true"


settings = ContractSettings()
