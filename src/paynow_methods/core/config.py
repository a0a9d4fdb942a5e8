"""
Configuration objects and helpers for the Paynow gateway.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .environment import build_environment

__all__ = [
    "ConfigError",
    "GatewayConfig",
    "GatewayParameters",
    "PRODUCTION_API_URL",
    "SANDBOX_API_URL",
    "load_gateway_config",
]

PRODUCTION_API_URL = "https://api.paynow.pl"
SANDBOX_API_URL = "https://api.sandbox.paynow.pl"

_PARAMETER_TO_ENV_KEY = {
    "api_key": "PAYNOW_API_KEY",
    "signature_key": "PAYNOW_SIGNATURE_KEY",
    "sandbox": "PAYNOW_SANDBOX",
    "api_url": "PAYNOW_API_URL",
    "active": "PAYNOW_ACTIVE",
    "blik_active": "PAYNOW_BLIK_ACTIVE",
    "card_active": "PAYNOW_CARD_ACTIVE",
    "timeout_seconds": "PAYNOW_TIMEOUT_SECONDS",
    "user_agent": "PAYNOW_USER_AGENT",
}

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class GatewayParameters:
    """
    Explicit parameter bundle for constructing :class:`GatewayConfig`.

    Callers can either instantiate this helper or pass the individual keyword
    arguments directly to :func:`load_gateway_config`.
    """

    api_key: Optional[str] = None
    signature_key: Optional[str] = None
    sandbox: Optional[bool | str] = None
    api_url: Optional[str] = None
    active: Optional[bool | str] = None
    blik_active: Optional[bool | str] = None
    card_active: Optional[bool | str] = None
    timeout_seconds: Optional[int | float | str] = None
    user_agent: Optional[str] = None

    def as_overrides(self) -> Dict[str, str]:
        overrides: Dict[str, str] = {}
        for field_name, env_key in _PARAMETER_TO_ENV_KEY.items():
            value = getattr(self, field_name)
            if value is None:
                continue
            overrides[env_key] = _stringify(value)
        return overrides


def _collect_parameter_overrides(
    parameters: Optional[GatewayParameters],
    explicit: Mapping[str, Any],
) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    if parameters is not None:
        overrides.update(parameters.as_overrides())

    for key, value in explicit.items():
        if value is None:
            continue
        try:
            env_key = _PARAMETER_TO_ENV_KEY[key]
        except KeyError as exc:  # pragma: no cover
            raise TypeError(f"Unknown gateway parameter '{key}'") from exc
        overrides[env_key] = _stringify(value)
    return overrides


class ConfigError(Exception):
    """Raised when the supplied configuration is invalid."""


def _parse_bool(values: Mapping[str, str], key: str, default: bool) -> bool:
    raw = values.get(key)
    if raw is None:
        return default
    normalized = raw.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigError(f"{key} must be a boolean flag, got '{raw}'")


def _parse_timeout(values: Mapping[str, str]) -> float:
    raw = values.get("PAYNOW_TIMEOUT_SECONDS", "30")
    try:
        timeout = float(raw)
    except ValueError as exc:
        raise ConfigError(
            f"PAYNOW_TIMEOUT_SECONDS must be a number, got '{raw}'"
        ) from exc
    if timeout <= 0:
        raise ConfigError("PAYNOW_TIMEOUT_SECONDS must be greater than zero")
    return timeout


@dataclass(frozen=True)
class GatewayConfig:
    """
    Store-level gateway settings, read once per request and never mutated.

    Missing credentials are a normal state: the store simply has not finished
    setting up the gateway, and :meth:`is_configured` reports ``False``.
    """

    api_key: str = ""
    signature_key: str = ""
    sandbox: bool = False
    api_url: str = PRODUCTION_API_URL
    active: bool = True
    blik_active: bool = False
    card_active: bool = False
    timeout_seconds: float = 30.0
    user_agent: str = "paynow-methods"

    def is_configured(self) -> bool:
        return bool(self.api_key and self.signature_key)

    def is_blik_active(self) -> bool:
        return self.blik_active

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "GatewayConfig":
        sandbox = _parse_bool(values, "PAYNOW_SANDBOX", False)
        default_url = SANDBOX_API_URL if sandbox else PRODUCTION_API_URL
        api_url = (values.get("PAYNOW_API_URL") or default_url).strip().rstrip("/")
        if not api_url.startswith(("http://", "https://")):
            raise ConfigError(f"PAYNOW_API_URL must be an http(s) URL, got '{api_url}'")

        return cls(
            api_key=values.get("PAYNOW_API_KEY", "").strip(),
            signature_key=values.get("PAYNOW_SIGNATURE_KEY", "").strip(),
            sandbox=sandbox,
            api_url=api_url,
            active=_parse_bool(values, "PAYNOW_ACTIVE", True),
            blik_active=_parse_bool(values, "PAYNOW_BLIK_ACTIVE", False),
            card_active=_parse_bool(values, "PAYNOW_CARD_ACTIVE", False),
            timeout_seconds=_parse_timeout(values),
            user_agent=values.get("PAYNOW_USER_AGENT", "").strip() or "paynow-methods",
        )

    @classmethod
    def from_env(
        cls,
        *,
        env_file: Optional[str] = ".env",
        overrides: Optional[Mapping[str, str]] = None,
        base: Optional[Mapping[str, str]] = None,
        parameters: Optional[GatewayParameters] = None,
        api_key: Optional[str] = None,
        signature_key: Optional[str] = None,
        sandbox: Optional[bool | str] = None,
        api_url: Optional[str] = None,
        active: Optional[bool | str] = None,
        blik_active: Optional[bool | str] = None,
        card_active: Optional[bool | str] = None,
        timeout_seconds: Optional[int | float | str] = None,
        user_agent: Optional[str] = None,
    ) -> "GatewayConfig":
        parameter_overrides = _collect_parameter_overrides(
            parameters,
            {
                "api_key": api_key,
                "signature_key": signature_key,
                "sandbox": sandbox,
                "api_url": api_url,
                "active": active,
                "blik_active": blik_active,
                "card_active": card_active,
                "timeout_seconds": timeout_seconds,
                "user_agent": user_agent,
            },
        )
        merged_overrides = dict(overrides or {})
        merged_overrides.update(parameter_overrides)

        environment = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(environment.variables)


def load_gateway_config(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[GatewayParameters] = None,
    api_key: Optional[str] = None,
    signature_key: Optional[str] = None,
    sandbox: Optional[bool | str] = None,
    api_url: Optional[str] = None,
    active: Optional[bool | str] = None,
    blik_active: Optional[bool | str] = None,
    card_active: Optional[bool | str] = None,
    timeout_seconds: Optional[int | float | str] = None,
    user_agent: Optional[str] = None,
) -> GatewayConfig:
    """
    Convenience wrapper that mirrors :meth:`GatewayConfig.from_env`.

    Settings can come from environment variables, a ``.env`` file, direct
    keyword arguments, or any combination of the three.
    """
    return GatewayConfig.from_env(
        env_file=env_file,
        overrides=overrides,
        base=base,
        parameters=parameters,
        api_key=api_key,
        signature_key=signature_key,
        sandbox=sandbox,
        api_url=api_url,
        active=active,
        blik_active=blik_active,
        card_active=card_active,
        timeout_seconds=timeout_seconds,
        user_agent=user_agent,
    )
