"""Derive ``write_file`` and ``write_string`` from a handle-writing method.

Write the code that puts your data on a handle; this module does the rest::

    @writers
    class Roster:
        def write_handle(self, data, handle):
            for datum in data:
                handle.write(f"datum: {datum}\\n")

    roster = Roster()
    roster.write_file(["a", "b"], "roster.txt")
    roster.write_string(["a", "b"])   # "datum: a\\ndatum: b\\n"

Generated functions take the invocant (class or instance) as their first
argument, open a text handle with the configured binmode, and forward
``(data, handle, *extra, **kwextra)`` to the configured method. The handle
is always closed before the generated function returns. Calling the
writers on the class itself works when the handle writer is a classmethod
or staticmethod.
"""

from __future__ import annotations

import codecs
import contextlib
import io
import logging
import os
import types
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import Any, NamedTuple

from pydantic import ValidationError

from linewise.config.loader import load_config
from linewise.config.models import WriteOptions, WriterConfig
from linewise.errors import (
    InvalidArgumentError,
    MissingHandleWriterError,
    PathConflictError,
    WriteError,
)
from linewise.layers import LayerSpec, parse_binmode

logger = logging.getLogger(__name__)

STRING_TARGET = "<string>"


class WriterSet(NamedTuple):
    """The two generated entry points for one configuration."""

    write_file: Callable[..., Any]
    write_string: Callable[..., Any]


def _coerce_config(config: WriterConfig | Mapping[str, Any] | None, **overrides: Any) -> WriterConfig:
    """Merge *config* with non-None *overrides* into a validated WriterConfig.

    Without an explicit *config* the ``writers`` section of the loaded
    linewise.yaml is the base.
    """
    if isinstance(config, WriterConfig):
        base = config.model_dump()
    elif config is None:
        try:
            base = load_config().writers.model_dump()
        except ValueError as e:
            raise InvalidArgumentError(str(e)) from e
    elif isinstance(config, Mapping):
        base = dict(config)
    else:
        raise InvalidArgumentError(f"config must be a WriterConfig or mapping, got {type(config).__name__}")
    base.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return WriterConfig(**base)
    except ValidationError as e:
        raise InvalidArgumentError(f"invalid writer configuration: {e}") from e


def _coerce_options(options: WriteOptions | Mapping[str, Any] | None) -> WriteOptions:
    if options is None:
        return WriteOptions()
    if isinstance(options, WriteOptions):
        return options
    if not isinstance(options, Mapping):
        raise InvalidArgumentError(f"options must be a mapping, got {type(options).__name__}")
    try:
        return WriteOptions(**options)
    except ValidationError as e:
        raise InvalidArgumentError(f"invalid write options: {e}") from e


def _resolve_delegate(invocant: object, method: str) -> Callable[..., Any]:
    delegate = getattr(invocant, method, None)
    if not callable(delegate):
        raise MissingHandleWriterError(invocant, method)
    return delegate


def _check_target(filename: str | os.PathLike[str] | None) -> Path:
    """Validate the destination before anything touches the filesystem."""
    if filename is None or not os.fspath(filename):
        raise InvalidArgumentError("no filename specified")
    path = Path(filename)
    if path.exists() and not path.is_file():
        raise PathConflictError(path)
    return path


def _open_file(path: Path, layer: LayerSpec) -> io.TextIOBase:
    try:
        codecs.lookup(layer.encoding)
        handle = open(path, "w", **layer.open_kwargs())
    except (OSError, LookupError) as e:
        raise WriteError(str(path), "open", e) from e
    logger.debug("opened %s for writing (binmode=%s)", path, layer.binmode)
    return handle


def _open_buffer(buffer: io.BytesIO, layer: LayerSpec) -> io.TextIOBase:
    try:
        return io.TextIOWrapper(buffer, **layer.open_kwargs())
    except LookupError as e:
        raise WriteError(STRING_TARGET, "open", e) from e


def _close(handle: io.TextIOBase, target: str) -> None:
    try:
        handle.close()
    except OSError as e:
        raise WriteError(target, "close", e) from e


def make_write_file(config: WriterConfig | None = None) -> Callable[..., Any]:
    """Build a ``write_file(invocant, data, filename, *extra, options=None)`` function.

    ``options`` may carry a ``binmode`` that overrides the configured default
    for that one call.
    """
    config = _coerce_config(config)
    method = config.method
    default_layer = parse_binmode(config.binmode)

    def write_file(
        invocant: object,
        data: Any,
        filename: str | os.PathLike[str] | None = None,
        /,
        *extra: Any,
        options: WriteOptions | Mapping[str, Any] | None = None,
        **kwextra: Any,
    ) -> Any:
        opts = _coerce_options(options)
        layer = parse_binmode(opts.binmode) if opts.binmode is not None else default_layer
        path = _check_target(filename)
        delegate = _resolve_delegate(invocant, method)

        handle = _open_file(path, layer)
        try:
            result = delegate(data, handle, *extra, **kwextra)
        except BaseException:
            with contextlib.suppress(OSError):
                handle.close()
            raise
        _close(handle, str(path))
        logger.debug("wrote %s via %s", path, method)
        return result

    write_file.__doc__ = f"Write *data* to *filename* through ``{method}``."
    return write_file


def make_write_string(config: WriterConfig | None = None) -> Callable[..., Any]:
    """Build a ``write_string(invocant, data, *extra)`` function.

    The handle wraps an octet buffer, so the configured binmode decides which
    bytes are produced. The return value is a ``str``: those bytes decoded
    with the same encoding. It equals what ``write_file`` leaves on disk once
    encoded again (``result.encode(layer.encoding)``), so its ``len()`` counts
    characters, not the octets in the file. Under ``encoding(UTF-16)`` a
    one-character result comes from a four-byte file (BOM plus one code unit).
    """
    config = _coerce_config(config)
    method = config.method
    layer = parse_binmode(config.binmode)

    def write_string(invocant: object, data: Any, /, *extra: Any, **kwextra: Any) -> str:
        delegate = _resolve_delegate(invocant, method)

        buffer = io.BytesIO()
        handle = _open_buffer(buffer, layer)

        try:
            delegate(data, handle, *extra, **kwextra)
            handle.flush()
            octets = buffer.getvalue()
        except BaseException:
            with contextlib.suppress(OSError):
                handle.close()
            raise
        _close(handle, STRING_TARGET)
        return octets.decode(layer.encoding)

    write_string.__doc__ = f"Return the text ``{method}`` writes for *data*."
    return write_string


def build_writers(config: WriterConfig | Mapping[str, Any] | None = None, **overrides: Any) -> WriterSet:
    """Generate both writers for one configuration.

    Keyword overrides (``method=``, ``binmode=``) take precedence over
    *config*. Each call produces independent functions.
    """
    resolved = _coerce_config(config, **overrides)
    return WriterSet(make_write_file(resolved), make_write_string(resolved))


# -- installation onto classes -------------------------------------------

EXPORTS: dict[str, Callable[[WriterConfig], Callable[..., Any]]] = {
    "write_file": make_write_file,
    "write_string": make_write_string,
}

GROUPS: dict[str, tuple[str, ...]] = {
    "default": ("write_file", "write_string"),
    "writers": ("write_file", "write_string"),
}


class InvocantMethod:
    """Descriptor binding a generated function to its class or instance."""

    def __init__(self, func: Callable[..., Any]) -> None:
        self.func = func
        self.__doc__ = func.__doc__

    def __get__(self, instance: object, owner: type | None = None) -> types.MethodType:
        invocant = owner if instance is None else instance
        return types.MethodType(self.func, invocant)


def expand_exports(exports: Iterable[str]) -> list[str]:
    """Expand ``-group`` / ``:group`` names and validate plain export names."""
    if isinstance(exports, str):
        exports = [exports]
    names: list[str] = []
    for item in exports:
        if item[:1] in ("-", ":"):
            group = GROUPS.get(item[1:])
            if group is None:
                raise InvalidArgumentError(f"unknown export group {item!r}; known: {sorted(GROUPS)}")
            candidates: Iterable[str] = group
        elif item in EXPORTS:
            candidates = (item,)
        else:
            raise InvalidArgumentError(f"{item!r} is not exported; known: {sorted(EXPORTS)}")
        names.extend(name for name in candidates if name not in names)
    return names


def install_writers(
    target: type,
    config: WriterConfig | Mapping[str, Any] | None = None,
    *,
    exports: Iterable[str] = ("-default",),
    rename: Mapping[str, str] | None = None,
    **overrides: Any,
) -> type:
    """Attach generated writers to *target* and return it."""
    if not isinstance(target, type):
        raise InvalidArgumentError(f"writers can only be installed on classes, got {target!r}")
    resolved = _coerce_config(config, **overrides)
    rename = dict(rename or {})
    names = expand_exports(exports)

    unknown = sorted(set(rename) - set(names))
    if unknown:
        raise InvalidArgumentError(f"cannot rename exports that are not installed: {unknown}")

    # Check every name before installing anything.
    attrs = {name: rename.get(name, name) for name in names}
    for attr in attrs.values():
        if not attr.isidentifier():
            raise InvalidArgumentError(f"{attr!r} is not a valid attribute name")
        if attr in vars(target):
            raise InvalidArgumentError(f"{target.__name__} already defines {attr!r}")
    if len(set(attrs.values())) != len(attrs):
        raise InvalidArgumentError(f"exports renamed onto the same attribute: {attrs}")

    for name, attr in attrs.items():
        setattr(target, attr, InvocantMethod(EXPORTS[name](resolved)))
        logger.debug(
            "installed %s.%s (method=%s, binmode=%s)",
            target.__name__,
            attr,
            resolved.method,
            resolved.binmode,
        )
    return target


def writers(
    cls: type | None = None,
    *,
    method: str | None = None,
    binmode: str | None = None,
    config: WriterConfig | Mapping[str, Any] | None = None,
    exports: Iterable[str] = ("-default",),
    rename: Mapping[str, str] | None = None,
) -> Any:
    """Class decorator installing ``write_file`` and ``write_string``.

    Usable bare (``@writers``) or with options
    (``@writers(binmode="raw", rename={"write_file": "save"})``).
    """

    def _decorate(target: type) -> type:
        return install_writers(
            target,
            config,
            exports=exports,
            rename=rename,
            method=method,
            binmode=binmode,
        )

    if cls is not None:
        return _decorate(cls)
    return _decorate
