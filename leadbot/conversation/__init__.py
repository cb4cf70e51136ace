"""Conversation module."""

from .orchestrator import IRunOrchestrator, RunOrchestrator

__all__ = ["IRunOrchestrator", "RunOrchestrator"]
