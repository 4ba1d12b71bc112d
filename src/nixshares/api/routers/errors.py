import traceback

from fastapi import HTTPException
from fastapi.logger import logger

from nixshares.exceptions import AlreadyInStateError, NotFoundError, ValidationError

STATUS_CODES = [
    (ValidationError, 400),
    (NotFoundError, 404),
    (AlreadyInStateError, 409),
]


def to_http_exception(action: str, error: Exception) -> HTTPException:
    for error_type, status_code in STATUS_CODES:
        if isinstance(error, error_type):
            logger.info(f"Rejected {action}: {error}")
            return HTTPException(status_code=status_code, detail=str(error))
    logger.error(f"Error {action}: {error}\n{traceback.format_exc()}")
    return HTTPException(status_code=500, detail=str(error))
