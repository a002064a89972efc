"""Priming and cross-engine output comparison before any timing."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Iterable

from .execution import BenchmarkCall, calls_by_mode
from .results import OutputRecord, ResultStatus

LOGGER = logging.getLogger(__name__)


@dataclass
class Verification:
    """Outcome of the verification pass."""

    status: ResultStatus
    outputs: list[OutputRecord] = field(default_factory=list)
    reference: OutputRecord | None = None
    failures: list[OutputRecord] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.status is ResultStatus.SUCCESS


def capture_outputs(calls: Iterable[BenchmarkCall]) -> list[OutputRecord]:
    """Call every function twice and keep the second output.

    The first call primes whatever cache the mode relies on, so the kept
    output is the one a timed (warm) call produces.
    """
    outputs: list[OutputRecord] = []
    for mode, tagged in calls_by_mode(calls).items():
        for tag, call in tagged.items():
            call()
            outputs.append(OutputRecord(type=mode, tag=tag, output=call()))
    return outputs


def select_reference(
    outputs: list[OutputRecord], preferred_tag: str | None
) -> OutputRecord:
    """Return the first output tagged ``preferred_tag``, else the first output."""
    if preferred_tag is not None:
        for record in outputs:
            if record.tag == preferred_tag:
                return record
    return outputs[0]


def verify(calls: Iterable[BenchmarkCall], preferred_tag: str | None) -> Verification:
    """Run the verification pass over ``calls``."""
    outputs = capture_outputs(calls)
    if not outputs:
        LOGGER.warning("No benchmark functions produced output")
        return Verification(status=ResultStatus.NO_BENCHMARKS)

    reference = select_reference(outputs, preferred_tag)
    failures = [
        record
        for record in outputs
        if record.output is None or record.output != reference.output
    ]
    if failures:
        LOGGER.warning(
            "Output mismatch against %s/%s: %s",
            reference.type.value,
            reference.tag,
            ", ".join(f"{r.type.value}/{r.tag}" for r in failures),
        )
        return Verification(
            status=ResultStatus.MISMATCHED_OUTPUT,
            outputs=outputs,
            reference=reference,
            failures=failures,
        )

    LOGGER.info("Verified %d benchmark outputs", len(outputs))
    return Verification(
        status=ResultStatus.SUCCESS, outputs=outputs, reference=reference
    )
