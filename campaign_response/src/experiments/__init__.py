"""Experiment entrypoints.

``run_response_model.main`` is the CLI; ``run_pipeline`` runs the same stages
programmatically from a :class:`~campaign_response.src.utils.config.PipelineConfig`.
"""

from __future__ import annotations

from .run_response_model import PipelineResult, main as run_response_model, run_pipeline

__all__ = ["PipelineResult", "run_pipeline", "run_response_model"]
