"""Environment-variable configuration.

All settings come from the process environment. Scripts may first call
`load_env_file` to populate it from a local `.env` without overriding values
that are already set.
"""

from __future__ import annotations

import os
import random
from dataclasses import dataclass
from pathlib import Path

from .application.dispatch import DispatchService
from .domain.simulator import DEFAULT_PROBES, DEFAULT_SUCCESS_PROBABILITY, make_simulator
from .types import DeliverFn, LogFn


@dataclass(frozen=True)
class DispatchSettings:
    deadline_seconds: float | None = None
    success_probability: float = DEFAULT_SUCCESS_PROBABILITY
    probes: int = DEFAULT_PROBES
    seed: int | None = None

    @classmethod
    def from_env(cls) -> DispatchSettings:
        deadline = _env_float("DISPATCH_DEADLINE_SECONDS", default=None)
        if deadline is not None and deadline <= 0:
            raise RuntimeError("DISPATCH_DEADLINE_SECONDS must be > 0")
        return cls(
            deadline_seconds=deadline,
            success_probability=_env_float(
                "DELIVERY_SUCCESS_PROBABILITY", default=DEFAULT_SUCCESS_PROBABILITY
            ),
            probes=_env_int("DELIVERY_PROBES", default=DEFAULT_PROBES),
            seed=_env_int("DELIVERY_SEED", default=None),
        )

    def build_simulator(self) -> DeliverFn:
        rng = random.Random(self.seed) if self.seed is not None else None
        return make_simulator(self.success_probability, self.probes, rng)

    def build_service(self, *, log: LogFn = print) -> DispatchService:
        return DispatchService(log=log, deadline_seconds=self.deadline_seconds)


def load_env_file(path: Path) -> None:
    if not path.exists():
        return

    for line in path.read_text(encoding="utf-8").splitlines():
        text = line.strip()
        if not text or text.startswith("#") or "=" not in text:
            continue
        key, value = text.split("=", 1)
        key = key.strip()
        value = value.strip()
        if not key:
            continue
        if value.startswith(("'", '"')) and value.endswith(("'", '"')) and len(value) >= 2:
            value = value[1:-1]
        os.environ.setdefault(key, value)


def _required_env(name: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value.strip()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    normalized = raw.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise RuntimeError(f"Invalid boolean value for {name}: {raw!r}")


def _env_float(name: str, default: float | None) -> float | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise RuntimeError(f"Invalid number for {name}: {raw!r}") from exc


def _env_int(name: str, default: int | None) -> int | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"Invalid integer for {name}: {raw!r}") from exc
