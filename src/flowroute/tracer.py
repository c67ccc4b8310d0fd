"""
Debug tracing for the routing pipeline.

A ``RouteTrace`` passed to ``route()`` receives one snapshot per pipeline
stage, which makes it easy to see why an edge took the shape it did:
how large the lattice was, how many cells the search expanded into a path,
what the compressed waypoints were, and whether (and why) the fallback ran.

Usage:
    >>> from flowroute import RouteTrace, route
    >>> trace = RouteTrace()
    >>> result = route((0, 0), "right", (200, 0), "left", [], trace=trace)
    >>> print(trace.summary())
    >>> trace.dump_to_file("route_trace.txt")

Stages recorded, in order:
- normalize - obstacles kept after normalization
- lattice - lattice dimensions, blocked cell count, start and goal cells
- search - raw lattice path length
- compress - compressed lattice waypoints
- connect - waypoints after endpoint stitching
- fallback - reason, when the fallback replaced the steps above
- smooth - command count and label point
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class PipelineStage:
    """
    Snapshot of state at a pipeline stage.

    Attributes:
        name: Name of this pipeline stage
        data: Dictionary of relevant data at this stage
    """

    name: str
    data: Dict[str, Any]

    def __str__(self) -> str:
        lines = [f"=== Stage: {self.name} ==="]
        for key, value in self.data.items():
            str_val = str(value)
            if len(str_val) > 100:
                str_val = str_val[:100] + "..."
            lines.append(f"  {key}: {str_val}")
        return "\n".join(lines)


@dataclass
class RouteTrace:
    """
    Complete trace of one routing call.

    Attributes:
        stages: Pipeline stages in the order they ran
    """

    stages: List[PipelineStage] = field(default_factory=list)

    def add_stage(self, name: str, data: Dict[str, Any]) -> None:
        """
        Add a pipeline stage snapshot.

        Args:
            name: Name of the stage (e.g., "lattice")
            data: Dictionary of relevant data at this stage
        """
        self.stages.append(PipelineStage(name, data.copy()))

    def get_stage(self, name: str) -> Optional[PipelineStage]:
        """Get a specific pipeline stage by name."""
        for stage in self.stages:
            if stage.name == name:
                return stage
        return None

    @property
    def stage_names(self) -> List[str]:
        return [stage.name for stage in self.stages]

    @property
    def used_fallback(self) -> bool:
        return self.get_stage("fallback") is not None

    def clear(self) -> None:
        self.stages.clear()

    def summary(self) -> str:
        """Generate a human-readable summary of the trace."""
        lines = [
            "=" * 60,
            "ROUTE TRACE SUMMARY",
            "=" * 60,
            "",
            f"Pipeline stages: {len(self.stages)}",
        ]
        for stage in self.stages:
            lines.append(f"  - {stage.name}")

        fallback = self.get_stage("fallback")
        lines.append("")
        if fallback is not None:
            lines.append(f"Fallback: {fallback.data.get('reason')}")
        else:
            lines.append("Fallback: none")
        return "\n".join(lines)

    def dump(self) -> str:
        """Generate a complete dump including every stage's data."""
        lines = [self.summary(), "", "=" * 60, "DETAILED TRACE", "=" * 60, ""]
        for stage in self.stages:
            lines.append(str(stage))
            lines.append("")
        return "\n".join(lines)

    def dump_to_file(self, filename: str) -> None:
        """Write the complete trace dump to a file."""
        with open(filename, "w", encoding="utf-8") as f:
            f.write(self.dump())
