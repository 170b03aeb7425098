"""Task graph combinators and the runner that executes them.

A pipeline is a tree of nodes::

    series(
        parallel(compile_styles, compile_scripts),
        parallel(minify_scripts, minify_styles),
        rewrite_markup,
    )

* :func:`series` starts each child after the previous one has completed and
  stops at the first child that fails.
* :func:`parallel` dispatches every child to a thread pool, waits for all
  of them, and fails if any child failed.

Stages in a parallel group write disjoint output paths, so they need no
locking. There are no timeouts: a hung stage stalls its branch.
"""

from __future__ import annotations

import contextvars
from collections.abc import Callable, Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import structlog

from sitepipe.services.result import StageError, StageResult

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Stage:
    """A named unit of work returning a StageResult."""

    name: str
    run: Callable[[], StageResult]


@dataclass(frozen=True)
class Series:
    nodes: tuple[Node, ...]


@dataclass(frozen=True)
class Parallel:
    nodes: tuple[Node, ...]


Node = Stage | Series | Parallel


def series(*nodes: Node) -> Series:
    """Run *nodes* one after another, stopping at the first failure."""
    return Series(nodes=nodes)


def parallel(*nodes: Node) -> Parallel:
    """Run *nodes* concurrently and join on all of them."""
    return Parallel(nodes=nodes)


def iter_stages(node: Node) -> Iterator[Stage]:
    """Yield every stage in *node*, depth first, in declaration order."""
    if isinstance(node, Stage):
        yield node
        return
    for child in node.nodes:
        yield from iter_stages(child)


class PipelineRunner:
    """Execute a node tree and fold the stage results into one result.

    Parameters:
        strict: Promote recovered errors to stage failures.
        max_workers: Upper bound on threads per parallel group.
    """

    def __init__(self, *, strict: bool = False, max_workers: int = 4) -> None:
        self._strict = strict
        self._max_workers = max(1, max_workers)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self, name: str, node: Node) -> StageResult:
        """Run *node* and return a pipeline-level result named *name*."""
        log.info("pipeline.start", pipeline=name)
        results: list[StageResult] = []
        ok = self._run_node(node, results)

        ran = {r.op for r in results}
        skipped = [s.name for s in iter_stages(node) if s.name not in ran]
        failed = next((r for r in results if not r.ok), None)

        error: StageError | None = None
        if failed is not None:
            cause = failed.error
            error = StageError(
                code=cause.code if cause else "STAGE_FAILED",
                message=f"{failed.op}: {cause.message if cause else 'failed'}",
                detail={"stage": failed.op, **(cause.detail if cause else {})},
            )

        log.info("pipeline.finish", pipeline=name, ok=ok, skipped=skipped)
        return StageResult(
            ok=ok,
            op=name,
            data={"stages": [r.summary() for r in results], "skipped": skipped},
            warnings=[w for r in results for w in r.warnings],
            error=error,
            recovered=[e for r in results for e in r.recovered],
        )

    def run_stage(self, stage: Stage) -> StageResult:
        """Run a single stage with the runner's error policy applied."""
        result = stage.run()
        if self._strict and result.ok and result.recovered:
            first = result.recovered[0]
            result = result.model_copy(
                update={
                    "ok": False,
                    "error": StageError(
                        code="STRICT_RECOVERED_ERROR",
                        message=first.message,
                        detail={"recovered": len(result.recovered), **first.detail},
                    ),
                }
            )
        if not result.ok:
            message = result.error.message if result.error else None
            log.error("stage.failed", stage=stage.name, error=message)
        return result

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _run_node(self, node: Node, results: list[StageResult]) -> bool:
        if isinstance(node, Stage):
            result = self.run_stage(node)
            results.append(result)
            return result.ok
        if isinstance(node, Series):
            for child in node.nodes:
                if not self._run_node(child, results):
                    return False
            return True
        return self._run_parallel(node, results)

    def _run_parallel(self, node: Parallel, results: list[StageResult]) -> bool:
        """Fan out, then join. Child results are appended in declaration order."""
        if not node.nodes:
            return True
        buckets: list[list[StageResult]] = [[] for _ in node.nodes]
        workers = min(self._max_workers, len(node.nodes))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                # Copy the caller's context so telemetry flags reach the worker.
                pool.submit(contextvars.copy_context().run, self._run_node, child, bucket)
                for child, bucket in zip(node.nodes, buckets, strict=True)
            ]
            outcomes = [future.result() for future in futures]
        for bucket in buckets:
            results.extend(bucket)
        return all(outcomes)
