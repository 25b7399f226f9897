# issuewatch/infra/transport/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Iterator

import httpx


# True while a report is being delivered; HTTP interceptors skip such requests
_REPORT_DELIVERY: ContextVar[bool] = ContextVar("ISSUEWATCH_REPORT_DELIVERY", default=False)


def is_delivering_report() -> bool:
    return _REPORT_DELIVERY.get()


@contextmanager
def delivering_report() -> Iterator[None]:
    token = _REPORT_DELIVERY.set(True)
    try:
        yield
    finally:
        _REPORT_DELIVERY.reset(token)


class BaseTransport(ABC):
    """
    Delivers one JSON document to the webhook.

    Implementations return the HTTP response and raise on network failure;
    status interpretation is left to the Monitor.
    """

    @abstractmethod
    async def post(self, url: str, *, payload: Dict[str, Any], headers: Dict[str, str]) -> httpx.Response:
        ...
