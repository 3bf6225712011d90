"""Pass-based orchestration for the renaming pipeline.

The driver keeps the program moving between text and tree form:

1. ``deshadow``: parse, make every binding name unique, print;
2. ``mine``: a fixed number of rounds of mine printed text -> re-parse ->
   rename -> print, so each round sees labels revealed by the previous one;
3. ``frequency``: profile the last round's tree, rename short names after
   their dominant context, print;
4. ``fixups``: cosmetic text substitutions on the final output.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from . import codegen, js_ast
from .config import PipelineConfig
from .exceptions import DemystifyError, PipelineExecutionError
from .js_ast import Node
from .passes.deshadow import resolve_shadowing
from .passes.fixups import name_anonymous_functions
from .passes.frequency import derive_labels, long_name_map, profile_context
from .passes.pattern_mining import candidate_rename_map, mine_candidates
from .passes.rename import apply_renames
from .report import DemystifyReport, MiningRound

LOG = logging.getLogger(__name__)

PassFn = Callable[["Context"], None]


@dataclass
class Context:
    """State threaded through the pipeline passes of one run."""

    source: str
    config: PipelineConfig = field(default_factory=PipelineConfig)
    tree: Optional[Node] = None
    text: str = ""
    output: str = ""
    report: DemystifyReport = field(default_factory=DemystifyReport)

    def parse(self, text: str) -> Node:
        return js_ast.parse(text, self.config.source_type)

    def render(self) -> str:
        if self.tree is None:
            raise ValueError("no program tree to render")
        self.text = codegen.generate(self.tree, indent=self.config.indent)
        self.output = self.text
        return self.text

    def ensure_tree(self) -> Node:
        """Parse and print the source unless an earlier pass already did."""

        if self.tree is None:
            self.tree = self.parse(self.source)
            self.render()
        return self.tree


class PassRegistry:
    def __init__(self) -> None:
        self._passes: Dict[str, Tuple[int, PassFn]] = {}

    def register_pass(self, name: str, fn: PassFn, order: int) -> None:
        self._passes[name] = (order, fn)

    @property
    def names(self) -> List[str]:
        return [name for _, name in sorted((order, name) for name, (order, _) in self._passes.items())]

    def run_passes(
        self,
        ctx: Context,
        skip: Optional[Iterable[str]] = None,
        only: Optional[Iterable[str]] = None,
    ) -> List[Tuple[str, float]]:
        selected: List[Tuple[int, str, PassFn]] = []
        skip_set = {name.strip() for name in (skip or []) if name}
        only_set = {name.strip() for name in (only or []) if name}

        for name, (order, fn) in self._passes.items():
            if skip_set and name in skip_set:
                continue
            if only_set and name not in only_set:
                continue
            selected.append((order, name, fn))
        selected.sort(key=lambda entry: (entry[0], entry[1]))

        timings: List[Tuple[str, float]] = []
        for _, name, fn in selected:
            start = time.perf_counter()
            try:
                fn(ctx)
            except DemystifyError:
                raise
            except Exception as exc:
                raise PipelineExecutionError(name, str(exc) or type(exc).__name__) from exc
            duration = time.perf_counter() - start
            timings.append((name, duration))
            LOG.info("pass %s completed in %.3fs", name, duration)
        ctx.report.timings.extend(timings)
        return timings


PIPELINE = PassRegistry()


# ---------------------------------------------------------------------------
# Pass implementations


def _pass_deshadow(ctx: Context) -> None:
    ctx.tree = ctx.parse(ctx.source)
    result = resolve_shadowing(ctx.tree)
    ctx.report.shadow_renames.extend(result.renames)
    ctx.report.references_rewritten += result.references_rewritten
    ctx.render()


def _pass_mine(ctx: Context) -> None:
    ctx.ensure_tree()
    config = ctx.config
    for index in range(1, config.round_limit + 1):
        candidates = mine_candidates(ctx.text)
        tree = ctx.parse(ctx.text)
        declared = js_ast.declared_names(tree)
        renames = {
            name: renamed
            for name, renamed in candidate_rename_map(candidates, config.separator).items()
            if name in declared
        }
        occurrences = apply_renames(tree, renames)
        ctx.tree = tree
        ctx.render()
        ctx.report.rounds.append(
            MiningRound(
                index=index,
                candidates=[pair.as_tuple() for pair in candidates],
                renames=renames,
                occurrences=occurrences,
            )
        )
        LOG.debug("round %d candidate pairs: %s", index, [pair.as_tuple() for pair in candidates])
        if config.until_converged and not renames:
            LOG.info("pattern mining converged after %d rounds", index)
            break
    else:
        if config.until_converged:
            ctx.report.warnings.append(
                f"pattern mining did not converge within {config.max_rounds} rounds"
            )


def _pass_frequency(ctx: Context) -> None:
    tree = ctx.ensure_tree()
    separator = ctx.config.separator
    histogram = profile_context(tree, ctx.config.stoplist)
    labels = derive_labels(histogram, separator)
    renames = long_name_map(labels, separator, js_ast.declared_names(tree))
    LOG.debug("long-name table: %s", labels)
    ctx.report.histogram = histogram
    ctx.report.long_names = labels
    ctx.report.frequency_renames = renames
    ctx.report.frequency_occurrences = apply_renames(tree, renames)
    ctx.render()


def _pass_fixups(ctx: Context) -> None:
    ctx.ensure_tree()
    text = ctx.text
    if ctx.config.name_functions:
        text = name_anonymous_functions(text, ctx.config.separator)
    ctx.output = text


PIPELINE.register_pass("deshadow", _pass_deshadow, 10)
PIPELINE.register_pass("mine", _pass_mine, 20)
PIPELINE.register_pass("frequency", _pass_frequency, 30)
PIPELINE.register_pass("fixups", _pass_fixups, 40)


def run(
    source: str,
    config: Optional[PipelineConfig] = None,
    skip: Optional[Iterable[str]] = None,
    only: Optional[Iterable[str]] = None,
) -> Context:
    """Run the registered passes over ``source`` and return the context.

    ``skip`` and ``only`` select passes by name, as in
    :meth:`PassRegistry.run_passes`.
    """

    ctx = Context(source=source, config=config or PipelineConfig())
    PIPELINE.run_passes(ctx, skip=skip, only=only)
    ctx.report.output_length = len(ctx.output)
    return ctx


def demystify(source: str, config: Optional[PipelineConfig] = None) -> str:
    """Return ``source`` with collision-free, inferred identifier names."""

    return run(source, config).output


__all__ = ["Context", "PassRegistry", "PIPELINE", "run", "demystify"]
