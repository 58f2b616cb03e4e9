"""Configuration model exports.

    from medcenter.config.models import ActionLogConfig, StorageConfig
"""

from medcenter.config.models.action_log import ActionLogConfig, AuthorizationConfig
from medcenter.config.models.api import APIConfig
from medcenter.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
    TracingConfig,
)
from medcenter.config.models.storage import (
    PostgresConfig,
    StorageConfig,
    StoreBackendConfig,
)

__all__ = [
    "APIConfig",
    "ActionLogConfig",
    "AuthorizationConfig",
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
    "PostgresConfig",
    "StorageConfig",
    "StoreBackendConfig",
    "TracingConfig",
]
