# issuewatch/infra/transport/http.py
"""
HttpxTransport - report delivery over httpx.AsyncClient

A fresh client is opened per report. Reports are rare and may be sent from
short-lived loops on background threads, so no client is shared across
event loops.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from .base import BaseTransport, delivering_report

logger = logging.getLogger(__name__)


class HttpxTransport(BaseTransport):
    def __init__(
        self,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Args:
            transport: httpx transport to send through (httpx.MockTransport in tests)
            timeout: request timeout in seconds; the httpx default applies when None
        """
        self._transport = transport
        self._timeout = timeout

    async def post(self, url: str, *, payload: Dict[str, Any], headers: Dict[str, str]) -> httpx.Response:
        with delivering_report():
            async with httpx.AsyncClient(transport=self._transport) as client:
                kwargs: Dict[str, Any] = {}
                if self._timeout is not None:
                    kwargs["timeout"] = self._timeout
                response = await client.post(url, json=payload, headers=headers, **kwargs)
        logger.debug("Report delivered to %s: HTTP %s", url, response.status_code)
        return response
