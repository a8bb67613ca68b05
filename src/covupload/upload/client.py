"""Single-shot submission of an upload job.

Exactly one POST is made per call. The outcome is returned, never raised, so
callers can match on the three result types.
"""

import httpx
import structlog

from covupload.config.models import UPLOAD_PATH
from covupload.upload.models import (
    TransportFailure,
    UploadEnvelope,
    UploadFailure,
    UploadResult,
    UploadSuccess,
)

log = structlog.get_logger()


def upload(
    envelope: UploadEnvelope,
    base_url: str,
    *,
    timeout: float = 30.0,
    client: httpx.Client | None = None,
) -> UploadResult:
    """POST the job to ``<base_url>/api/upload`` and classify the response.

    Args:
        envelope: Job to send.
        base_url: Service root, with or without a trailing slash.
        timeout: Seconds before the attempt counts as a transport failure.
        client: Pre-built client (tests inject a mock transport here).
            A fresh client is opened and closed when None.
    """
    url = base_url.rstrip("/") + UPLOAD_PATH
    payload = envelope.to_json().encode("utf-8")
    headers = {"Content-Type": "application/json"}

    log.debug("upload.start", url=url, files=len(envelope.source_files), size=len(payload))
    try:
        if client is None:
            with httpx.Client(timeout=timeout) as own_client:
                response = own_client.post(url, content=payload, headers=headers)
        else:
            response = client.post(url, content=payload, headers=headers, timeout=timeout)
    except httpx.TransportError as e:
        log.error("upload.transport_error", url=url, error=str(e))
        return TransportFailure(cause=e)

    if response.status_code != httpx.codes.OK:
        log.error("upload.rejected", url=url, status=response.status_code)
        return UploadFailure(status_code=response.status_code, body=response.text)

    log.info("upload.accepted", url=url)
    try:
        return UploadSuccess(body=response.json())
    except ValueError:
        # Not JSON, or not even UTF-8; the acknowledgement is kept as text
        return UploadSuccess(body=response.text)
