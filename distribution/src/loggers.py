import logging

from distribution.src import openobserve
from distribution.src.schemas import RequestInfo


logger = logging.getLogger("uvicorn.error")


def logEvent(requestInfo: RequestInfo, data: dict) -> None:
    """
    Log an audit event to OpenObserve with request context.

    Args:
        requestInfo (RequestInfo): Metadata about the current request.
        data (dict): Additional event-specific details to include in the log.

    Notes:
        - Automatically attaches `_app_id`, `_method` and `_path`.
        - Identity is established upstream by the gateway, no user key is attached.
        - An unreachable sink is reported to the process log, the caller's
          operation has already been persisted and is not failed.
    """
    logDetails = {
        "_method": requestInfo.method,
        "_path": requestInfo.path,
        "_app_id": requestInfo.app_id,
    }
    logDetails.update(data)
    try:
        openobserve.logEvent(logDetails)
    except Exception as e:
        logger.warning(f"Audit event not shipped: {e}")
