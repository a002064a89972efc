"""Synthesis of per-engine benchmark workloads."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Iterable

from .catalog import Feature

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Workload:
    """Synthesized template body of one engine.

    Attributes
    ----------
    name:
        Engine name the workload belongs to.
    body:
        Concatenated feature fragments, repeated ``template_repeats`` times.
    filename:
        Workload file name relative to the engine's workload directory.
    path:
        Absolute path of the written file, ``None`` when no on-disk mode
        needed one.
    """

    name: str
    body: str
    filename: str
    path: Path | None = None


def workload_filename(name: str) -> str:
    return f"{name}.txt"


def compose_body(fragments: Iterable[tuple[Feature, str]], repeats: int) -> str:
    """Join fragments (each followed by a newline) and repeat the result.

    ``fragments`` must already be in canonical feature order.
    """
    if repeats < 1:
        raise ValueError(f"repeats must be >= 1, got {repeats}")
    unit = "".join(f"{syntax}\n" for _, syntax in fragments)
    return unit * repeats


def synthesize_workload(
    name: str,
    fragments: Iterable[tuple[Feature, str]],
    *,
    repeats: int,
    workload_dir: Path,
    write_file: bool,
) -> Workload:
    """Build the workload of engine ``name`` and optionally persist it.

    Write failures propagate: a benchmark without its workload on disk
    cannot produce trustworthy timings.
    """
    body = compose_body(fragments, repeats)
    filename = workload_filename(name)
    path: Path | None = None
    if write_file:
        path = workload_dir / filename
        path.write_text(body, encoding="utf-8")
        LOGGER.debug("Wrote %d characters of workload to %s", len(body), path)
    return Workload(name=name, body=body, filename=filename, path=path)
