"""
Utilities for assembling the settings used to configure the WioPayments client.

Settings come from three layers: a base mapping (the process environment by
default), an optional ``.env`` file that only fills keys the base lacks, and
explicit overrides that always win. The result is a plain mapping consumed by
:class:`wiopayments.core.config.WioPaymentsConfig`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

ENV_PREFIX = "WIOPAYMENTS_"


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        return value[1:-1]
    return value


def parse_env_file(path: Path) -> Dict[str, str]:
    """
    Read ``KEY=VALUE`` pairs from ``path``.

    Blank lines and ``#`` comments are skipped, an ``export`` prefix is
    accepted, and matching quotes around values are removed. A missing file
    yields an empty mapping.
    """
    values: Dict[str, str] = {}
    try:
        data = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return values

    for raw_line in data.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        key, value = line.split("=", 1)
        key = key.strip()
        if key:
            values[key] = _unquote(value.strip())
    return values


@dataclass(frozen=True)
class GatewayEnvironment:
    """The resolved settings, restricted to ``WIOPAYMENTS_*`` keys."""

    variables: Mapping[str, str]

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.variables.get(key, default)


def build_environment(
    *,
    env_file: Optional[str] = ".env",
    base: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> GatewayEnvironment:
    """
    Assemble a :class:`GatewayEnvironment` from the layered sources.

    ``base`` defaults to :data:`os.environ`; pass ``env_file=None`` to skip
    the file entirely.
    """
    merged: Dict[str, str] = {
        key: value
        for key, value in (os.environ if base is None else base).items()
        if key.startswith(ENV_PREFIX)
    }

    if env_file is not None:
        for key, value in parse_env_file(Path(env_file)).items():
            if key.startswith(ENV_PREFIX):
                merged.setdefault(key, value)

    if overrides:
        merged.update(overrides)

    return GatewayEnvironment(variables=merged)
