"""Configuration schema using Pydantic.

Controls naming of generated artifacts, the result typing mode and which
methods the parser accepts. Values come from defaults, an optional JSON file
(camelCase keys) and ``EZDISPATCH_*`` environment variables.
"""

from typing import Literal

from pydantic import ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings

ResultMode = Literal["erased", "uniform"]


class GeneratorConfig(BaseSettings):
    """Root configuration for ezdispatch."""
    request_suffix: str = "Request"  # <Name>Request union alias
    service_suffix: str = "Service"  # <Name>Service dispatcher class
    proxy_suffix: str = "Proxy"  # <Name>Proxy wrapper class
    variant_prefix: str = ""  # prepended to every request variant class name
    # erased: call() returns Result[Any, Any] and proxies cast back per method.
    # uniform: every method must declare the same Result[S, E].
    result_mode: ResultMode = "erased"
    allow_sync_methods: bool = True
    include_private: bool = False  # _helper methods become request variants too
    emit_header: bool = True
    emit_all: bool = True  # extend __all__ with the generated names
    support_module: str = Field(default="ezdispatch", min_length=1)  # where Ok/Err/Result are imported from

    model_config = ConfigDict(
        env_prefix="EZDISPATCH_",
        env_nested_delimiter="__",
        extra="forbid",
    )

    @field_validator("request_suffix", "service_suffix", "proxy_suffix")
    @classmethod
    def _identifier_suffix(cls, value: str) -> str:
        value = value.strip()
        if value and not f"X{value}".isidentifier():
            raise ValueError(f"'{value}' cannot end a Python identifier")
        return value

    @field_validator("variant_prefix")
    @classmethod
    def _identifier_prefix(cls, value: str) -> str:
        value = value.strip()
        if value and not value.isidentifier():
            raise ValueError(f"'{value}' cannot start a Python identifier")
        return value
