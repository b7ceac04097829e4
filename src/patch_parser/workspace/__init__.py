"""
Working Copy Layer

Disposable git checkouts of pull requests.
"""

from .checkout import WorkingCopyManager, WorkspaceError, CheckoutError, MergeConflictError

__all__ = ['WorkingCopyManager', 'WorkspaceError', 'CheckoutError', 'MergeConflictError']
