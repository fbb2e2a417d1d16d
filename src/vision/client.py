"""VisionClient — abstract base for meal analysis backends."""
from abc import ABC, abstractmethod

from src.meal import MealAnalysis


class VisionClient(ABC):
    @abstractmethod
    async def analyze(self, image_bytes: bytes) -> MealAnalysis:
        """Analyze a meal photo. Raises MealAnalysisError subclasses on failure."""
        ...
