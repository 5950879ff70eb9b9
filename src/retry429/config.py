"""
Client configuration.

A `ClientConfig` is built once per client and never mutated afterwards.
Options the retry layer does not understand are kept in
`transport_options` and handed to the transport untouched.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from .exceptions import ConfigurationError
from .retry import DEFAULT_RETRY_ATTEMPTS, RetryConfig

PLUGINS = ("default", "retry")

# Preferred key first, then accepted aliases
_ALIASES: dict[str, tuple[str, ...]] = {
    "plugin": ("plugin", "plugins"),
    "retry": ("retry", "retry_enabled", "retryEnabled"),
    "retry_attempts": ("retryAttempts", "retry_attempts", "maxAttempts", "max_attempts"),
    "retry_initial_delay": ("retry_initial_delay", "retryInitialDelay"),
    "retry_delay_multiplier": ("retryDelayMultiplier", "retry_delay_multiplier"),
    "respect_retry_after": ("respectRetryAfter", "respect_retry_after"),
    "timeout": ("timeout",),
}
_MSECS_KEYS = ("retryInitialDelayMsecs", "retry_initial_delay_msecs")


@dataclass(frozen=True)
class ClientConfig:
    """
    Options for a `RetryClient`.

    Attributes:
        plugin: "retry" enables 429 retries, "default" makes a single attempt
        retry: Enable retries regardless of the plugin selector
        retry_attempts: Total attempt ceiling including the first
        retry_initial_delay: Delay before the second attempt in seconds
        retry_delay_multiplier: Exponential growth factor between attempts
        respect_retry_after: Honour a longer Retry-After on 429 responses
        timeout: Per-attempt transport timeout in seconds
        transport_options: Passed through to the transport untouched
    """

    plugin: str = "default"
    retry: bool = False
    retry_attempts: int | None = None
    retry_initial_delay: float = 0.5
    retry_delay_multiplier: float = 2.0
    respect_retry_after: bool = True
    timeout: float = 120.0
    transport_options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.plugin not in PLUGINS:
            raise ConfigurationError(
                f"Unknown plugin {self.plugin!r}, expected one of {', '.join(PLUGINS)}",
                option="plugin",
            )
        if self.retry_attempts is not None and self.retry_attempts < 1:
            raise ConfigurationError(
                f"retryAttempts must be a positive integer, got {self.retry_attempts}",
                option="retry_attempts",
            )
        if self.retry_initial_delay < 0:
            raise ConfigurationError("retry initial delay cannot be negative", option="retry_initial_delay")
        if self.retry_delay_multiplier < 1:
            raise ConfigurationError("retry delay multiplier must be >= 1", option="retry_delay_multiplier")
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive", option="timeout")
        object.__setattr__(self, "transport_options", MappingProxyType(dict(self.transport_options)))

    @property
    def retry_enabled(self) -> bool:
        return self.retry or self.plugin == "retry"

    def retry_config(self) -> RetryConfig:
        """Retry settings for one logical request."""
        if not self.retry_enabled:
            return RetryConfig.no_retry()
        return RetryConfig(
            max_attempts=self.retry_attempts or DEFAULT_RETRY_ATTEMPTS,
            base_delay=self.retry_initial_delay,
            multiplier=self.retry_delay_multiplier,
            respect_retry_after=self.respect_retry_after,
        )

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None) -> "ClientConfig":
        """Parse client options, supporting camelCase and snake_case keys."""
        remaining = dict(options or {})
        values: dict[str, Any] = {}

        for name, keys in _ALIASES.items():
            for key in keys:
                if key in remaining:
                    value = remaining.pop(key)
                    values.setdefault(name, value)

        for key in _MSECS_KEYS:
            if key in remaining:
                msecs = _coerce(float, remaining.pop(key), key)
                values.setdefault("retry_initial_delay", msecs / 1000.0)

        plugin = values.get("plugin")
        if isinstance(plugin, (list, tuple)):
            plugin = "retry" if "retry" in plugin else (plugin[0] if plugin else "default")
        if plugin is not None:
            values["plugin"] = str(plugin)

        for name, kind in (
            ("retry_attempts", int),
            ("retry_initial_delay", float),
            ("retry_delay_multiplier", float),
            ("timeout", float),
        ):
            if values.get(name) is not None:
                values[name] = _coerce(kind, values[name], name)
        for name in ("retry", "respect_retry_after"):
            if name in values:
                values[name] = bool(values[name])

        return cls(transport_options=remaining, **values)


def _coerce(kind: type, value: Any, option: str) -> Any:
    try:
        return kind(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid value for {option}: {value!r}", option=option) from e
