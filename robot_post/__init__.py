"""
Robot Post-Processor Package.

Translates vendor-neutral robot trajectories (linear and joint moves plus
base and tool frames) into NovaTech RT-500 controller programs, applying
firmware-dependent syntax and safety validation.

Subpackages:
    domain: Validated value types, motion points, trajectory aggregate, rule tables
    dialect: Program text generation
    documents: JSON/YAML input schema and loading
    configs: Runtime configuration loading and validation
    utils: Logging configuration and filesystem helpers
    scripts: Command-line entry points
"""

__version__ = "1.0.0"

__all__ = ["domain", "dialect", "documents", "configs", "utils", "pipeline"]
