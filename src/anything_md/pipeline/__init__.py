"""Fetch, convert and rewrite pipeline plus detached task scheduling."""

from .pipeline_service import ConvertedDocument, ConvertPipeline
from .scheduler import AsyncioTaskScheduler, BackgroundTasksScheduler, TaskScheduler

__all__ = [
    "AsyncioTaskScheduler",
    "BackgroundTasksScheduler",
    "ConvertPipeline",
    "ConvertedDocument",
    "TaskScheduler",
]
