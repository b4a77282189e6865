"""Corpus build orchestration."""

from .runner import CorpusBuildPipeline

__all__ = ["CorpusBuildPipeline"]
