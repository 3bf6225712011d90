"""Structured diagnostics for a renaming run."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict, List, Tuple


@dataclass
class MiningRound:
    """What one pattern-mining round found and applied."""

    index: int
    candidates: List[Tuple[str, str]] = field(default_factory=list)
    renames: Dict[str, str] = field(default_factory=dict)
    occurrences: int = 0


@dataclass
class DemystifyReport:
    """Summarises a single pipeline run for tuning the heuristics."""

    shadow_renames: List[Tuple[str, str]] = field(default_factory=list)
    references_rewritten: int = 0
    rounds: List[MiningRound] = field(default_factory=list)
    histogram: Dict[str, Dict[str, int]] = field(default_factory=dict)
    long_names: Dict[str, List[str]] = field(default_factory=dict)
    frequency_renames: Dict[str, str] = field(default_factory=dict)
    frequency_occurrences: int = 0
    timings: List[Tuple[str, float]] = field(default_factory=list)
    output_length: int = 0
    warnings: List[str] = field(default_factory=list)

    @property
    def candidate_pairs(self) -> List[Tuple[str, str]]:
        """Every candidate pair mined across all rounds, in order."""

        pairs: List[Tuple[str, str]] = []
        for round_ in self.rounds:
            pairs.extend(round_.candidates)
        return pairs

    def to_text(self) -> str:
        """Format the report as a human-readable summary."""

        lines: List[str] = []
        lines.append(f"Deshadowed bindings: {len(self.shadow_renames)}")
        for original, renamed in self.shadow_renames:
            lines.append(f"  {original} -> {renamed}")
        for round_ in self.rounds:
            lines.append(
                f"Mining round {round_.index}: {len(round_.candidates)} candidates, "
                f"{len(round_.renames)} renamed ({round_.occurrences} occurrences)"
            )
            for name, label in round_.candidates:
                lines.append(f"  {name}: {label}")
        lines.append(f"Frequency renames: {len(self.frequency_renames)}")
        for name, renamed in self.frequency_renames.items():
            lines.append(f"  {name} -> {renamed}")
        if self.timings:
            lines.append("Pass timings:")
            for name, duration in self.timings:
                lines.append(f"  {name}: {duration:.3f}s")
        lines.append(f"Final output length: {self.output_length} chars")
        if self.warnings:
            lines.append("Warnings:")
            lines.extend(f"  - {warning}" for warning in self.warnings)
        return "\n".join(lines)

    def to_json(self) -> Dict[str, object]:
        """Return a JSON-serialisable representation."""

        data = asdict(self)
        data["shadow_renames"] = [list(pair) for pair in self.shadow_renames]
        data["rounds"] = [
            {
                "index": round_.index,
                "candidates": [list(pair) for pair in round_.candidates],
                "renames": dict(round_.renames),
                "occurrences": round_.occurrences,
            }
            for round_ in self.rounds
        ]
        data["timings"] = [{"pass": name, "seconds": round(duration, 6)} for name, duration in self.timings]
        return data


__all__ = ["MiningRound", "DemystifyReport"]
