from abc import ABC, abstractmethod
from app.pipeline.context import AnalysisContext
from app.ir.validation import ValidationResult


class PipelineStage(ABC):
    name: str

    @abstractmethod
    def run(self, context: AnalysisContext) -> ValidationResult:
        """
        Must:
        - read only the snapshot / metrics already on the context
        - write its own fields to the context
        - report data quality issues as warnings, bad input as errors
        - NEVER call other stages or the network
        """
        pass
