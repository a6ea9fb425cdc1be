"""Metrics collected while converting a value tree into an XML document."""

import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict

MS_PER_SECOND = 1000.0


@dataclass
class ConversionMetrics:
    """Counters for a single conversion call."""

    elements_created: int = 0
    attributes_set: int = 0
    text_nodes: int = 0
    cdata_sections: int = 0
    fragments_imported: int = 0
    empty_collections_skipped: int = 0
    max_depth_reached: int = 0
    processing_time_ms: float = 0.0
    started_at: float = field(default_factory=time.perf_counter, repr=False)

    @property
    def elements_per_second(self) -> float:
        """Calculate elements created per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.elements_created * MS_PER_SECOND) / self.processing_time_ms

    @property
    def nodes_total(self) -> int:
        """Elements plus text, CDATA and imported fragment nodes."""
        return (
            self.elements_created
            + self.text_nodes
            + self.cdata_sections
            + self.fragments_imported
        )

    def record_depth(self, depth: int) -> None:
        if depth > self.max_depth_reached:
            self.max_depth_reached = depth

    def finish(self) -> "ConversionMetrics":
        """Stamp the elapsed time since the metrics object was created."""
        self.processing_time_ms = (time.perf_counter() - self.started_at) * MS_PER_SECOND
        return self

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result.pop("started_at")
        result["elements_per_second"] = self.elements_per_second
        result["nodes_total"] = self.nodes_total
        return result
