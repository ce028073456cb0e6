"""Analysis orchestration — rate limiting, worker pool, free descriptions."""

from cartographer.analysis.limiter import RateLimiter
from cartographer.analysis.models import AnalysisOutcome, ContentLimits
from cartographer.analysis.orchestrator import analyze

__all__ = ["AnalysisOutcome", "ContentLimits", "RateLimiter", "analyze"]
