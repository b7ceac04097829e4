"""
patch-parser

NSQ worker that labels and checks newly opened GitHub pull requests.
"""

__version__ = "0.1.0"

from .pipeline import ReviewPipeline, FixedDelay, NoDelay

__all__ = ["ReviewPipeline", "FixedDelay", "NoDelay"]
