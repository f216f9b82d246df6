"""Live editing sessions with debounced auto-commit."""

from pughrepo.session.matrix_session import MatrixSession, create_session

__all__ = ["MatrixSession", "create_session"]
