"""
PR Classifier

Maps an opened pull request to exactly one triage label.
"""

import fnmatch
import logging
from typing import Dict, Iterable, Optional, Sequence

from ..models.review import Label


logger = logging.getLogger(__name__)


class Classifier:
    """
    Deterministic classification of pull requests.

    Checks run in order and the first match wins:
    1. title mentions "proposal" -> design review
    2. every changed file is documentation -> docs review
    3. anything else -> triage
    """

    def __init__(self, doc_patterns: Sequence[str], label_names: Optional[Dict[Label, str]] = None):
        """
        Initialize classifier.

        Args:
            doc_patterns: fnmatch patterns identifying documentation files
            label_names: GitHub label name per Label (defaults to the enum values)
        """
        self.doc_patterns = list(doc_patterns)
        self.label_names = label_names or {label: label.value for label in Label}

    def classify(self, title: str, changed_files: Sequence[str]) -> Label:
        if "proposal" in title.lower():
            return Label.DESIGN_REVIEW
        if self.is_docs_only(changed_files):
            return Label.DOCS_REVIEW
        return Label.TRIAGE

    def is_docs_only(self, changed_files: Iterable[str]) -> bool:
        """True if there is at least one changed file and all of them are docs."""
        files = list(changed_files)
        return bool(files) and all(self._is_doc_file(path) for path in files)

    def _is_doc_file(self, file_path: str) -> bool:
        name = file_path.rsplit('/', 1)[-1]
        return any(
            fnmatch.fnmatchcase(file_path, pattern) or fnmatch.fnmatchcase(name, pattern)
            for pattern in self.doc_patterns
        )

    def label_name(self, label: Label) -> str:
        """GitHub name of a label."""
        return self.label_names[label]
