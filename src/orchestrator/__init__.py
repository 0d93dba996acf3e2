"""Run bookkeeping: JSONL event log and cross-strategy comparison.

``orchestrator.compare`` depends on ``ports`` and is imported explicitly.
"""

from . import log

__all__ = ["log"]
