"""linewise — write your linewise code for handles; this does the rest."""

from linewise.config import LinewiseConfig, WriteOptions, WriterConfig, load_config
from linewise.errors import (
    InvalidArgumentError,
    LinewiseError,
    MissingHandleWriterError,
    PathConflictError,
    WriteError,
)
from linewise.layers import DEFAULT_BINMODE, LayerSpec, parse_binmode
from linewise.writers import (
    WriterSet,
    build_writers,
    install_writers,
    make_write_file,
    make_write_string,
    writers,
)

__version__ = "0.105.0"

__all__ = [
    "DEFAULT_BINMODE",
    "InvalidArgumentError",
    "LayerSpec",
    "LinewiseConfig",
    "LinewiseError",
    "MissingHandleWriterError",
    "PathConflictError",
    "WriteError",
    "WriteOptions",
    "WriterConfig",
    "WriterSet",
    "build_writers",
    "install_writers",
    "load_config",
    "make_write_file",
    "make_write_string",
    "parse_binmode",
    "writers",
]
