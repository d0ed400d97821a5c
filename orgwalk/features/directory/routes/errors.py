"""Translation of directory errors into HTTP errors."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import HTTPException, status

from orgwalk.db.directory import (
    CallerError,
    NotFoundError,
    TransportError,
    TransportTimeoutError,
)

logger = logging.getLogger(__name__)


@contextmanager
def directory_errors() -> Iterator[None]:
    """Re-raise directory errors as HTTPException with a matching status."""
    try:
        yield
    except CallerError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)
        ) from e
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(e)
        ) from e
    except TransportTimeoutError as e:
        logger.warning("Directory request timed out: %s", e)
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail="Directory service timed out",
        ) from e
    except TransportError as e:
        logger.warning("Directory request failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Directory service error (status {e.status_code})",
        ) from e
