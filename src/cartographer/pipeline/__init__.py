"""Pipeline controller and status inspection."""

from cartographer.pipeline.controller import RunMode, RunResult, run_pipeline
from cartographer.pipeline.status import StatusReport, collect_status

__all__ = ["RunMode", "RunResult", "StatusReport", "collect_status", "run_pipeline"]
