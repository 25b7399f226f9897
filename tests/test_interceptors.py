"""
Interceptors: each hook reports, then behaves exactly like the original
"""

import asyncio
import gc
import logging
from types import SimpleNamespace

import httpx
import pytest

from issuewatch import AttributeSlot, CustomHost, HttpxTransport, ProcessHost
from issuewatch.core.hosts import FETCH, GLOBAL_FETCH, WINDOW_ERROR
from issuewatch.core.interceptors import error_from_log_record

from .conftest import make_host


def raised(exc):
    try:
        raise exc
    except BaseException as e:
        return e


def http_host():
    return CustomHost({
        FETCH: AttributeSlot(FETCH, httpx.AsyncClient, "send"),
        GLOBAL_FETCH: AttributeSlot(GLOBAL_FETCH, httpx.Client, "send"),
    })


def api(status_code=200, body="", exc=None):
    def handler(request):
        if exc is not None:
            raise exc(f"cannot reach {request.url.host}", request=request)
        return httpx.Response(status_code, text=body)
    return httpx.MockTransport(handler)


class TestUncaughtExceptions:
    def test_reports_and_calls_original(self, runtime, transport, make_monitor):
        monitor = make_monitor(make_host(runtime))
        monitor.start()
        exc = raised(ValueError("boom"))

        result = runtime.excepthook(ValueError, exc, exc.__traceback__)
        assert monitor.flush(timeout=5)

        assert result == ("excepthook", exc)
        [payload] = transport.payloads
        assert payload["event"] == "uncaught_exception"
        assert payload["error"] == "boom"
        assert payload["errorType"] == "uncaught"
        assert payload["function"] == "raised"

    def test_keyboard_interrupt_is_not_reported(self, runtime, transport, make_monitor):
        monitor = make_monitor(make_host(runtime))
        monitor.start()
        exc = KeyboardInterrupt()

        result = runtime.excepthook(KeyboardInterrupt, exc, None)
        monitor.flush(timeout=5)

        assert result == ("excepthook", exc)
        assert transport.payloads == []

    def test_thread_exception(self, runtime, transport, make_monitor):
        monitor = make_monitor(make_host(runtime))
        monitor.start()
        exc = raised(RuntimeError("worker died"))
        args = SimpleNamespace(exc_type=RuntimeError, exc_value=exc, exc_traceback=exc.__traceback__, thread=None)

        result = runtime.thread_excepthook(args)
        monitor.flush(timeout=5)

        assert result == ("thread_hook", exc)
        [payload] = transport.payloads
        assert payload["event"] == "thread_exception"
        assert payload["errorType"] == "uncaught"

    def test_thread_system_exit_is_not_reported(self, runtime, transport, make_monitor):
        monitor = make_monitor(make_host(runtime))
        monitor.start()
        args = SimpleNamespace(exc_type=SystemExit, exc_value=SystemExit(0), exc_traceback=None, thread=None)

        runtime.thread_excepthook(args)
        monitor.flush(timeout=5)

        assert transport.payloads == []


class TestUnhandledRejections:
    def test_reports_reason_and_forwards(self, runtime, transport, make_monitor):
        monitor = make_monitor(make_host(runtime))
        monitor.start()
        context = {"message": "Task exception was never retrieved", "exception": RuntimeError("No credits")}

        result = runtime.rejection_handler(object(), context)
        monitor.flush(timeout=5)

        assert result == ("rejection", "Task exception was never retrieved")
        [payload] = transport.payloads
        assert payload["event"] == "unhandled_rejection"
        assert payload["error"] == "No credits"
        assert payload["errorType"] == "promise"

    def test_context_without_exception_reports_message(self, runtime, transport, make_monitor):
        monitor = make_monitor(make_host(runtime))
        monitor.start()

        runtime.rejection_handler(object(), {"message": "Future was destroyed but it is pending"})
        monitor.flush(timeout=5)

        [payload] = transport.payloads
        assert payload["error"] == "Future was destroyed but it is pending"
        assert "stack" not in payload

    @pytest.mark.anyio
    async def test_never_retrieved_task_is_reported_once(self, transport, make_monitor):
        loop = asyncio.get_running_loop()
        # the test runner collects loop errors with its own handler; use the default one here
        runner_handler = loop.get_exception_handler()
        loop.set_exception_handler(None)
        monitor = make_monitor(ProcessHost(), enable_fetch_monitoring=False, monitor_http_errors=False)
        monitor.start()

        async def charge():
            raise RuntimeError("No credits")

        task = loop.create_task(charge())
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        done = task.done()
        del task
        gc.collect()
        assert done

        await monitor.drain()
        monitor.stop()
        loop.set_exception_handler(runner_handler)

        # asyncio's own log line for the same failure is not reported again
        assert [p["event"] for p in transport.payloads] == ["unhandled_rejection"]
        assert transport.payloads[0]["error"] == "No credits"
        assert transport.payloads[0]["function"] == "charge"


class TestConsoleErrors:
    def record(self, msg, *args, level=logging.ERROR, name="app", exc_info=None):
        return logging.getLogger(name).makeRecord(name, level, __file__, 1, msg, args, exc_info)

    def test_exception_as_message(self):
        exc = ValueError("x")
        assert error_from_log_record(self.record(exc)) is exc

    def test_exception_as_first_argument(self):
        exc = ValueError("x")
        assert error_from_log_record(self.record("Checkout failed: %s", exc)) is exc

    def test_exc_info(self):
        exc = raised(ValueError("x"))
        record = self.record("Checkout failed", exc_info=(ValueError, exc, exc.__traceback__))
        assert error_from_log_record(record) is exc

    @pytest.mark.parametrize("record_kwargs", [
        {"msg": "plain message"},
        {"msg": "code %s", "args": (42,)},
        {"msg": ValueError("x"), "level": logging.WARNING},
        {"msg": ValueError("x"), "name": "issuewatch.core.monitor"},
    ])
    def test_not_reported(self, record_kwargs):
        args = record_kwargs.pop("args", ())
        msg = record_kwargs.pop("msg")
        assert error_from_log_record(self.record(msg, *args, **record_kwargs)) is None

    def test_reports_through_installed_handle(self, runtime, transport, make_monitor):
        calls = []
        runtime.console_handle = lambda logger, record: calls.append(record)
        monitor = make_monitor(make_host(runtime))
        monitor.start()
        logger = logging.getLogger("app.checkout")
        record = self.record("Checkout failed: %s", ValueError("card declined"), name="app.checkout")

        runtime.console_handle(logger, record)
        monitor.flush(timeout=5)

        assert calls == [record]
        [payload] = transport.payloads
        assert payload["event"] == "console_error"
        assert payload["error"] == "card declined"
        assert payload["errorType"] == "manual"

    def test_disabled_logger_is_ignored(self, runtime, transport, make_monitor):
        monitor = make_monitor(make_host(runtime))
        monitor.start()
        logger = logging.Logger("muted")
        logger.disabled = True

        runtime.console_handle(logger, self.record(ValueError("x"), name="muted"))
        monitor.flush(timeout=5)

        assert transport.payloads == []

    def test_real_logger_call(self, transport, make_monitor):
        monitor = make_monitor(ProcessHost(), enable_fetch_monitoring=False, monitor_http_errors=False)
        monitor.start()

        logging.getLogger("app.billing").error("Charge failed: %s", RuntimeError("gateway down"))
        logging.getLogger("app.billing").warning("retrying")
        monitor.stop()
        monitor.flush(timeout=5)

        [payload] = transport.payloads
        assert payload["event"] == "console_error"
        assert payload["error"] == "gateway down"


class TestWindowErrors:
    def test_reports_error_argument(self, runtime, transport, make_monitor):
        monitor = make_monitor(make_host(runtime))
        monitor.start()
        exc = raised(TypeError("undefined is not a function"))

        result = runtime.onerror("Uncaught TypeError", "app.js", 10, 4, exc)
        monitor.flush(timeout=5)

        assert result == ("onerror", ("Uncaught TypeError", "app.js", 10, 4, exc))
        [payload] = transport.payloads
        assert payload["event"] == "window_error"
        assert payload["error"] == "undefined is not a function"
        assert payload["errorType"] == "uncaught"

    def test_message_only(self, runtime, transport, make_monitor):
        runtime.onerror = None
        monitor = make_monitor(make_host(runtime, hooks=[WINDOW_ERROR]))
        monitor.start()

        assert runtime.onerror("Script error.") is None
        monitor.flush(timeout=5)

        [payload] = transport.payloads
        assert payload["error"] == "Script error."
        monitor.stop()
        assert runtime.onerror is None


class TestAsyncFetch:
    pytestmark = pytest.mark.anyio

    async def test_error_status_is_reported(self, transport, make_monitor):
        monitor = make_monitor(http_host())
        monitor.start()

        async with httpx.AsyncClient(transport=api(503, "upstream down")) as client:
            response = await client.get("https://api.example.com/items")
        await monitor.drain()

        assert response.status_code == 503
        [payload] = transport.payloads
        assert payload["event"] == "fetch_503"
        assert payload["error"] == (
            "HTTP 503 Service Unavailable: GET https://api.example.com/items - upstream down"
        )
        assert payload["errorType"] == "manual"

    @pytest.mark.parametrize("status_code", [200, 201, 418])
    async def test_other_statuses_are_not_reported(self, status_code, transport, make_monitor):
        monitor = make_monitor(http_host())
        monitor.start()

        async with httpx.AsyncClient(transport=api(status_code)) as client:
            response = await client.get("https://api.example.com/items")
        await monitor.drain()

        assert response.status_code == status_code
        assert transport.payloads == []

    async def test_http_errors_disabled(self, transport, make_monitor):
        monitor = make_monitor(http_host(), monitor_http_errors=False)
        monitor.start()

        async with httpx.AsyncClient(transport=api(500)) as client:
            await client.get("https://api.example.com/items")
        await monitor.drain()

        assert transport.payloads == []

    async def test_custom_status_codes(self, transport, make_monitor):
        monitor = make_monitor(http_host(), http_error_codes=[418])
        monitor.start()

        async with httpx.AsyncClient(transport=api(418)) as client:
            await client.get("https://api.example.com/teapot")
        await monitor.drain()

        assert [p["event"] for p in transport.payloads] == ["fetch_418"]

    async def test_long_body_is_truncated(self, transport, make_monitor):
        monitor = make_monitor(http_host())
        monitor.start()

        async with httpx.AsyncClient(transport=api(500, "x" * 2000)) as client:
            await client.get("https://api.example.com/items")
        await monitor.drain()

        error = transport.payloads[0]["error"]
        assert error.endswith(" - " + "x" * 500)

    async def test_network_error_is_reported_and_reraised(self, transport, make_monitor):
        monitor = make_monitor(http_host())
        monitor.start()

        async with httpx.AsyncClient(transport=api(exc=httpx.ConnectError)) as client:
            with pytest.raises(httpx.ConnectError):
                await client.get("https://api.example.com/items")
        await monitor.drain()

        [payload] = transport.payloads
        assert payload["event"] == "fetch_network_error"
        assert payload["errorType"] == "promise"
        assert "api.example.com" in payload["error"]

    async def test_report_delivery_is_not_intercepted(self, make_monitor):
        webhook_calls = []

        def webhook(request):
            webhook_calls.append(request)
            return httpx.Response(503)

        monitor = make_monitor(
            http_host(),
            transport=HttpxTransport(transport=httpx.MockTransport(webhook)),
            endpoint="https://hooks.example.com/issues",
        )
        monitor.start()

        monitor.capture_error("checkout", ValueError("x"))
        await monitor.drain()

        # a 503 from the webhook is a delivery failure, never a new report
        assert len(webhook_calls) == 1


class TestSyncFetch:
    def test_error_status_is_reported(self, transport, make_monitor):
        monitor = make_monitor(http_host())
        monitor.start()

        with httpx.Client(transport=api(404)) as client:
            response = client.get("https://api.example.com/missing")
        assert monitor.flush(timeout=5)

        assert response.status_code == 404
        [payload] = transport.payloads
        assert payload["event"] == "fetch_404"
        assert payload["error"] == "HTTP 404 Not Found: GET https://api.example.com/missing"

    def test_network_error(self, transport, make_monitor):
        monitor = make_monitor(http_host())
        monitor.start()

        with httpx.Client(transport=api(exc=httpx.ReadTimeout)) as client:
            with pytest.raises(httpx.ReadTimeout):
                client.get("https://api.example.com/slow")
        monitor.flush(timeout=5)

        [payload] = transport.payloads
        assert payload["event"] == "fetch_network_error"
        assert payload["errorType"] == "manual"
