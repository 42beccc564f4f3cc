"""
Retry helper for read queries hit by transient connection errors
(stale pooled connections, brief network drops).
"""

import functools
import logging
import time

from sqlalchemy.exc import DBAPIError, OperationalError

from verdant.extensions import db


logger = logging.getLogger(__name__)


def with_db_resilience(max_retries=2, backoff_ms=100):
    """
    Retry the wrapped read on OperationalError / DBAPIError.

    Between attempts the session is rolled back, the pool is disposed, and
    the wait doubles from ``backoff_ms``. The last error is re-raised.
    Only wrap idempotent reads.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except (OperationalError, DBAPIError) as exc:
                    db.session.rollback()
                    if attempt >= max_retries:
                        logger.error(
                            'Database read %s failed after %d attempts: %s',
                            func.__name__, attempt + 1, exc,
                        )
                        raise
                    logger.warning(
                        'Transient database error in %s (attempt %d/%d): %s',
                        func.__name__, attempt + 1, max_retries + 1, exc,
                    )
                    db.engine.dispose()
                    time.sleep((backoff_ms * (2 ** attempt)) / 1000.0)
        return wrapper
    return decorator
