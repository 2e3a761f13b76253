# src/liftcheck/db/__init__.py
"""Database configuration and utilities."""

from .session import SessionLocal, get_db, get_session_factory
from .transaction import run_transaction

__all__ = ["get_db", "get_session_factory", "run_transaction", "SessionLocal"]
