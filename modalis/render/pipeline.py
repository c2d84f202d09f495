"""
Transform pipeline — named, priority-ordered content stages.

Stages run in ascending priority; equal priorities keep registration
order. Exactly one stage may render nested components: it receives an
``on_component`` hook in addition to the content, and the pipeline wraps
its execution in the caller's component scope (the asset collector).
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, ContextManager, Iterator, List, Optional

from ..faults import Fault, PipelineFault

logger = logging.getLogger("modalis.render.pipeline")

DEFAULT_PRIORITY = 10

Stage = Callable[..., str]
# Yields the ``on_component`` hook for the component stage
ComponentScope = Callable[[], ContextManager[Callable[[Any], None]]]


@dataclass(frozen=True)
class PipelineStage:
    name: str
    fn: Stage
    priority: int
    order: int
    renders_components: bool = False


@contextmanager
def _no_scope() -> Iterator[Callable[[Any], None]]:
    yield lambda component: None


class TransformPipeline:
    """
    Ordered list of ``(priority, registration order, stage)``.

    Example:
        pipeline = TransformPipeline()
        pipeline.register(do_blocks, priority=9, name="do_blocks", renders_components=True)
        pipeline.register(wptexturize, priority=10)
        html = pipeline.run(raw, component_scope=collector_scope)
    """

    def __init__(self):
        self._stages: List[PipelineStage] = []
        self._ordered: Optional[List[PipelineStage]] = None

    def register(
        self,
        stage: Stage,
        priority: int = DEFAULT_PRIORITY,
        name: Optional[str] = None,
        renders_components: bool = False,
    ) -> "TransformPipeline":
        name = name or getattr(stage, "__name__", None) or f"stage_{len(self._stages)}"
        if not callable(stage):
            raise PipelineFault(stage=name, reason="stage is not callable")
        if renders_components and self.component_stage is not None:
            raise PipelineFault(
                stage=name,
                reason=f"'{self.component_stage.name}' already renders nested components",
            )

        self._stages.append(
            PipelineStage(
                name=name,
                fn=stage,
                priority=priority,
                order=len(self._stages),
                renders_components=renders_components,
            )
        )
        self._ordered = None
        return self

    @property
    def component_stage(self) -> Optional[PipelineStage]:
        for stage in self._stages:
            if stage.renders_components:
                return stage
        return None

    @property
    def stages(self) -> List[PipelineStage]:
        """Stages in execution order (sorted once per change)."""
        if self._ordered is None:
            self._ordered = sorted(self._stages, key=lambda s: (s.priority, s.order))
        return list(self._ordered)

    def run(self, initial: str, component_scope: Optional[ComponentScope] = None) -> str:
        """
        Feed ``initial`` through every stage.

        Raises:
            PipelineFault: a stage raised anything other than a Fault
        """
        content = initial
        for stage in self.stages:
            try:
                if stage.renders_components:
                    scope = component_scope() if component_scope is not None else _no_scope()
                    with scope as on_component:
                        content = stage.fn(content, on_component)
                else:
                    content = stage.fn(content)
            except Fault:
                raise
            except Exception as e:
                logger.error(f"Pipeline stage '{stage.name}' failed: {e}")
                raise PipelineFault(stage=stage.name, reason=str(e), running=True) from e
        return content

    def __len__(self) -> int:
        return len(self._stages)
