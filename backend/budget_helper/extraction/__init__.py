"""
Bill extraction module.

Talks to the Anthropic API: registers an attachment, asks the model for a
structured bill record and parses the (possibly fenced) JSON reply.
"""

from budget_helper.extraction.service import BillExtractionService
from budget_helper.extraction.exceptions import ExtractionError

__all__ = ["BillExtractionService", "ExtractionError"]
