"""Application-level utilities (environment, settings, runtime overrides)."""

from .settings import AppSettings
from .environment import Paths, build_default_paths
from .configuration import RuntimeConfig, load_runtime_config
