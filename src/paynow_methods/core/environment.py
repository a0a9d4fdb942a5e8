"""
Resolution of the ``PAYNOW_*`` settings a store runs with.

Settings are merged from three sources, weakest first: a dotenv file, the
process environment, and explicit overrides (CLI ``--set`` pairs or keyword
arguments). The dotenv file only contributes ``PAYNOW_*`` keys, so a shared
project ``.env`` cannot leak unrelated values into the gateway. Every gateway
key remembers which source supplied it, which is what the CLI logs when a
store looks misconfigured.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, MutableMapping, Optional, Tuple

__all__ = [
    "ENV_PREFIX",
    "GatewayEnvironment",
    "build_environment",
    "load_env_file",
]

ENV_PREFIX = "PAYNOW_"

SOURCE_DOTENV = "dotenv"
SOURCE_ENVIRON = "environ"
SOURCE_OVERRIDE = "override"


def _split_assignment(line: str) -> Optional[Tuple[str, str]]:
    text = line.strip()
    if text.startswith("export "):
        text = text[len("export "):].lstrip()
    if not text or text.startswith("#"):
        return None

    name, sep, raw = text.partition("=")
    name = name.strip()
    if not sep or not name:
        return None

    raw = raw.strip()
    if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in ("'", '"'):
        raw = raw[1:-1]
    return name, raw


def _read_dotenv(path: Path) -> Dict[str, str]:
    """Gateway keys from ``path``; a missing file contributes nothing."""
    if not path.is_file():
        return {}
    pairs = (_split_assignment(line) for line in path.read_text(encoding="utf-8").splitlines())
    return {name: value for name, value in filter(None, pairs) if name.startswith(ENV_PREFIX)}


def load_env_file(
    path: str = ".env",
    *,
    environ: Optional[MutableMapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Copy gateway keys from ``path`` into ``environ`` (default :data:`os.environ`)
    without replacing anything already set. Returns the merged mapping.
    """
    target: MutableMapping[str, str] = os.environ if environ is None else environ
    for name, value in _read_dotenv(Path(path)).items():
        target.setdefault(name, value)
    return dict(target)


@dataclass(frozen=True)
class GatewayEnvironment:
    variables: Mapping[str, str]
    sources: Mapping[str, str] = field(default_factory=dict)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.variables.get(key, default)

    def source_of(self, key: str) -> Optional[str]:
        """``"dotenv"``, ``"environ"``, ``"override"`` or ``None`` for a gateway key."""
        return self.sources.get(key)

    def gateway_settings(self) -> Dict[str, str]:
        return {name: value for name, value in self.variables.items() if name.startswith(ENV_PREFIX)}


def build_environment(
    *,
    env_file: Optional[str] = ".env",
    base: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> GatewayEnvironment:
    """
    Merge dotenv, ``base`` (defaults to :data:`os.environ`) and ``overrides``.

    ``env_file=None`` skips the dotenv layer.
    """
    layers = (
        (SOURCE_DOTENV, _read_dotenv(Path(env_file)) if env_file is not None else {}),
        (SOURCE_ENVIRON, os.environ if base is None else base),
        (SOURCE_OVERRIDE, overrides or {}),
    )

    variables: Dict[str, str] = {}
    sources: Dict[str, str] = {}
    for source, values in layers:
        for name, value in values.items():
            variables[name] = value
            if name.startswith(ENV_PREFIX):
                sources[name] = source
    return GatewayEnvironment(variables=variables, sources=sources)
