"""
PR Checks

Classification, sign-off and formatting checks run by the review pipeline.
"""

from .classifier import Classifier
from .signing import SigningChecker
from .formatting import FormatChecker, GofmtChecker, BlackChecker, build_format_checker

__all__ = [
    'Classifier',
    'SigningChecker',
    'FormatChecker',
    'GofmtChecker',
    'BlackChecker',
    'build_format_checker',
]
