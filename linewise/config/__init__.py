from .loader import load_config
from .models import LinewiseConfig, WriteOptions, WriterConfig

__all__ = [
    "LinewiseConfig",
    "WriteOptions",
    "WriterConfig",
    "load_config",
]
