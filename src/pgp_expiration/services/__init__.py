"""Plugin services: evaluation, batch resolution and verb handling."""

from pgp_expiration.services.batch_runner import ResolutionBatchRunner
from pgp_expiration.services.expiration_evaluator import ExpirationEvaluator
from pgp_expiration.services.plugin import ExpirationPlugin

__all__ = ["ExpirationEvaluator", "ExpirationPlugin", "ResolutionBatchRunner"]
