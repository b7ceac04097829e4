"""
Comment Formatting Layer

Markdown bodies for pull request comments.
"""

from .comments import CommentFormatter

__all__ = ['CommentFormatter']
