from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from linewise.layers import DEFAULT_BINMODE, parse_binmode


class WriterConfig(BaseModel):
    """Options fixed when writers are generated for a class."""

    model_config = ConfigDict(frozen=True)

    method: str = "write_handle"
    binmode: str = DEFAULT_BINMODE

    @field_validator("method")
    @classmethod
    def _method_is_identifier(cls, value: str) -> str:
        if not value.isidentifier():
            raise ValueError(f"method must be a valid attribute name, got {value!r}")
        return value

    @field_validator("binmode")
    @classmethod
    def _binmode_parses(cls, value: str) -> str:
        parse_binmode(value)
        return value


class WriteOptions(BaseModel):
    """Per-call options accepted by ``write_file``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    binmode: str | None = None

    @field_validator("binmode")
    @classmethod
    def _binmode_parses(cls, value: str | None) -> str | None:
        if value is not None:
            parse_binmode(value)
        return value


class LinewiseConfig(BaseModel):
    writers: WriterConfig = Field(default_factory=WriterConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
