from .runner import CurationPipeline, RunTotals, Stage

__all__ = ["CurationPipeline", "RunTotals", "Stage"]
