from resumefit.errors import ConfigurationError, ProviderError, ResumeFitError, ValidationError
from resumefit.matching.engine import ATSEngine, create_engine
from resumefit.models import AnalysisRequest, AnalysisResult, ScoreBreakdown

__all__ = [
    "ATSEngine",
    "create_engine",
    "AnalysisRequest",
    "AnalysisResult",
    "ScoreBreakdown",
    "ResumeFitError",
    "ValidationError",
    "ProviderError",
    "ConfigurationError",
]
__version__ = "0.3.0"
