"""Post-processor configuration loading and validation."""

from robot_post.configs.loader import (
    ConfigError,
    LoggingConfig,
    OutputConfig,
    PostProcessorConfig,
    ProcessingConfig,
    ReachPolicy,
    WorkspaceConfig,
    load_config,
)

__all__ = [
    "ConfigError",
    "LoggingConfig",
    "OutputConfig",
    "PostProcessorConfig",
    "ProcessingConfig",
    "ReachPolicy",
    "WorkspaceConfig",
    "load_config",
]
