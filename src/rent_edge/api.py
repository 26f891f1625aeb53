"""Public async entry points.

The scoring engine is built lazily on first use (configuration is read and
validated in a worker thread). Concurrent first callers share a single
in-flight instantiation task; afterwards calls return without suspending on I/O.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

from .config import load_config
from .errors import EngineUnavailable
from .models import (
    DealScoreInput,
    DealScoreResult,
    LeverageScoreInput,
    LeverageScoreResult,
)
from .scoring import ScoringEngine

logger = logging.getLogger(__name__)

_engine: ScoringEngine | None = None
_pending: asyncio.Task | None = None
_config_path: Path | str | None = None


def configure(config_path: Path | str | None = None) -> None:
    """Set the override config file used by the next instantiation."""
    global _config_path
    _config_path = config_path
    reset_engine()


def reset_engine() -> None:
    """Drop the engine singleton (tests, or after a config change)."""
    global _engine, _pending
    _engine = None
    _pending = None


def loaded_engine() -> ScoringEngine | None:
    """The engine if it has been instantiated, else None."""
    return _engine


def _build_engine(config_path: Path | str | None) -> ScoringEngine:
    engine = ScoringEngine(config=load_config(config_path))
    if not engine.health_check():
        raise EngineUnavailable("Scoring engine health check failed")
    return engine


async def _instantiate() -> ScoringEngine:
    global _engine
    loop = asyncio.get_running_loop()
    try:
        engine = await loop.run_in_executor(None, _build_engine, _config_path)
    except EngineUnavailable:
        logger.error("Scoring engine failed its health check")
        raise
    except (OSError, ValueError, KeyError, TypeError) as e:
        logger.error("Failed to load scoring engine: %s", e)
        raise EngineUnavailable(f"Failed to load scoring engine: {e}") from e

    _engine = engine
    logger.info("Scoring engine loaded, version: %s", engine.version)
    return engine


async def get_engine() -> ScoringEngine:
    """Return the engine, instantiating it once per process."""
    global _pending
    if _engine is not None:
        return _engine

    loop = asyncio.get_running_loop()
    task = _pending
    if task is None or task.get_loop() is not loop:
        task = loop.create_task(_instantiate())
        _pending = task
    try:
        # One cancelled caller must not cancel the shared instantiation
        return await asyncio.shield(task)
    finally:
        if task.done() and _pending is task:
            _pending = None


async def calculate_deal_score(inp: DealScoreInput | dict[str, Any]) -> DealScoreResult:
    """Deal Score for one flattened input. Raises EngineUnavailable."""
    if isinstance(inp, dict):
        inp = DealScoreInput.from_dict(inp)
    engine = await get_engine()
    return engine.score_deal(inp)


async def calculate_leverage_score(inp: LeverageScoreInput | dict[str, Any]) -> LeverageScoreResult:
    """Leverage Score for one flattened input. Raises EngineUnavailable."""
    if isinstance(inp, dict):
        inp = LeverageScoreInput.from_dict(inp)
    engine = await get_engine()
    return engine.score_leverage(inp)
