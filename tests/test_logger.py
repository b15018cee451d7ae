"""
End-to-end tests for the leveled entry points.

Test coverage:
- Threshold filtering across all levels
- Chaining, formatting, JSON embedding and redaction through a real call
- Colors, pretty-print, caller tracing and single-point tracing
- Panic (LogPanic carrying the record) and fatal (write once, then exit,
  from the main thread or a worker thread)
- Module-level functions bound to the default store
"""

import io
import json
import os
import subprocess
import sys
import tempfile
import textwrap
import threading
from pathlib import Path

import pytest

import envelog
from envelog.colors import COLOR_RESET
from envelog.encoding import loads_strict
from envelog.errors import EnvelogError, LogPanic
from envelog.levels import Level
from envelog.logger import Logger
from envelog.masking import MASK


def _records(buffer: io.StringIO):
    return [json.loads(line) for line in buffer.getvalue().splitlines()]


def _log_through_wrapper(logger: Logger, message: str) -> None:
    logger.info(message)


# =============================================================================
# Threshold
# =============================================================================
@pytest.mark.parametrize("threshold", ["trace", "debug", "info", "warn", "error"])
def test_threshold_filters_lower_levels(store, buffer, threshold):
    store.log_level(threshold)
    log = Logger(store)

    for name in ("trace", "debug", "info", "warn", "error"):
        getattr(log, name)(name)

    emitted = [r["level"] for r in _records(buffer)]
    expected = [
        level.label for level in Level if Level[threshold.upper()] <= level <= Level.ERROR
    ]
    assert emitted == expected


def test_default_threshold_is_info(store, buffer):
    log = Logger(store)

    log.debug("hidden")
    log.info("shown")

    assert [r["message"] for r in _records(buffer)] == ["shown"]


# =============================================================================
# Message shapes
# =============================================================================
def test_chaining(store, buffer):
    Logger(store).info("a", 1, "b")

    assert _records(buffer)[0]["message"] == "a 1 b"


def test_formatting(store, buffer):
    Logger(store).warn("%d left", 2)

    record = _records(buffer)[0]
    assert record["level"] == "warn"
    assert record["message"] == "2 left"


def test_warning_alias(store, buffer):
    Logger(store).warning("careful")

    assert _records(buffer)[0]["level"] == "warn"


def test_empty_call(store, buffer):
    Logger(store).info()

    assert _records(buffer)[0]["message"] == ""


def test_json_string_embedded_natively(store, buffer):
    Logger(store).info('{"event":"login","ok":true}')

    assert '"message":{"event":"login","ok":true}' in buffer.getvalue()
    assert _records(buffer)[0]["message"] == {"event": "login", "ok": True}


def test_non_json_string_is_literal(store, buffer):
    Logger(store).info("{not json")

    assert _records(buffer)[0]["message"] == "{not json"


def test_redaction_end_to_end(store, buffer):
    store.enable_obscure_sensitive_data(["password"])

    Logger(store).info('{"u":"x","password":"secret"}')

    assert _records(buffer)[0]["message"] == {"u": "x", "password": MASK}
    assert "secret" not in buffer.getvalue()


def test_redaction_of_structured_value(store, buffer):
    store.enable_obscure_sensitive_data(["token"])

    Logger(store).error({"user": "ada", "token": "abc", "attempts": 3})

    assert _records(buffer)[0]["message"] == {"user": "ada", "token": MASK, "attempts": 3}


def test_one_record_per_line(store, buffer):
    log = Logger(store)

    log.info("one")
    log.info({"two": 2})

    assert buffer.getvalue().count("\n") == 2


def test_non_finite_values_keep_record_strict(store, buffer):
    Logger(store).info({"ratio": float("nan")})

    assert loads_strict(buffer.getvalue())["message"] == "{'ratio': nan}"


def test_non_finite_values_do_not_defeat_redaction(store, buffer):
    store.enable_obscure_sensitive_data(["password"])

    Logger(store).info({"ratio": float("nan"), "password": "hunter2"})

    record = loads_strict(buffer.getvalue())
    assert "hunter2" not in buffer.getvalue()
    assert MASK in record["message"]


def test_writes_to_binary_mode_file():
    with tempfile.SpooledTemporaryFile(mode="w+b") as out:
        store = envelog.ConfigStore()
        store.log_writer(out)

        Logger(store).info("to bytes")

        out.seek(0)
        assert json.loads(out.read().decode("utf-8"))["message"] == "to bytes"


# =============================================================================
# Rendering options
# =============================================================================
def test_pretty_and_compact_parse_equal(store, buffer):
    log = Logger(store)
    payload = {"a": [1, {"b": None}]}

    log.info(payload)
    compact = buffer.getvalue()
    buffer.seek(0)
    buffer.truncate()
    store.enable_json_pretty_print()
    log.info(payload)
    pretty = buffer.getvalue()

    first, second = json.loads(compact), json.loads(pretty)
    assert first["message"] == second["message"]
    assert pretty.count("\n") > 1


def test_error_colored_red(store, buffer):
    store.enable_colors()

    Logger(store).error("boom")

    assert buffer.getvalue().startswith("\x1b[31m{")
    assert buffer.getvalue().endswith(COLOR_RESET + "\n")


def test_disabling_colors_removes_escapes(store, buffer):
    store.enable_colors()
    store.disable_colors()

    Logger(store).error("boom")

    assert "\x1b[" not in buffer.getvalue()


# =============================================================================
# Caller tracing
# =============================================================================
def test_caller_tracing_reports_call_site(store, buffer):
    store.enable_trace_caller()

    Logger(store).info("traced")

    record = _records(buffer)[0]
    assert record["file"].endswith("test_logger.py")
    assert record["function"] == "test_caller_tracing_reports_call_site"


def test_caller_fields_absent_when_tracing_disabled(store, buffer):
    Logger(store).info("untraced")

    assert set(_records(buffer)[0]) == {"level", "message", "time"}


def test_without_single_point_tracing_wrapper_is_reported(store, buffer):
    store.enable_trace_caller()

    _log_through_wrapper(Logger(store), "via wrapper")

    assert _records(buffer)[0]["function"] == "_log_through_wrapper"


def test_single_point_tracing_skips_wrapper(store, buffer):
    store.enable_trace_caller()
    store.enable_single_point_tracing()

    _log_through_wrapper(Logger(store), "via wrapper")

    assert _records(buffer)[0]["function"] == "test_single_point_tracing_skips_wrapper"


def test_fatal_reports_call_site(store, buffer):
    store.enable_trace_caller()

    with pytest.raises(SystemExit):
        Logger(store).fatal("bye")

    assert _records(buffer)[0]["function"] == "test_fatal_reports_call_site"


def test_panic_reports_call_site(store):
    store.enable_trace_caller()

    with pytest.raises(LogPanic) as excinfo:
        Logger(store).panic("stop")

    assert json.loads(excinfo.value.record)["function"] == "test_panic_reports_call_site"


# =============================================================================
# Panic and fatal
# =============================================================================
def test_panic_raises_with_record_and_writes_nothing(store, buffer):
    store.log_level("fatal")

    with pytest.raises(LogPanic) as excinfo:
        Logger(store).panic("disk full", 3)

    record = json.loads(excinfo.value.record)
    assert record["level"] == "panic"
    assert record["message"] == "disk full 3"
    assert excinfo.value.code == "LOG_PANIC"
    assert isinstance(excinfo.value, EnvelogError)
    assert buffer.getvalue() == ""


def test_fatal_writes_once_then_exits(store, buffer):
    store.log_level("fatal")

    with pytest.raises(SystemExit) as excinfo:
        Logger(store).fatal("unrecoverable")

    assert excinfo.value.code == 1
    records = _records(buffer)
    assert len(records) == 1
    assert records[0]["level"] == "fatal"
    assert records[0]["message"] == "unrecoverable"


def test_fatal_from_worker_thread_ends_process():
    script = textwrap.dedent(
        """
        import threading

        import envelog

        worker = threading.Thread(target=envelog.fatal, args=("worker gave up",))
        worker.start()
        worker.join()
        print("STILL RUNNING")
        """
    )
    root = Path(__file__).resolve().parents[1]
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(root), env.get("PYTHONPATH")]))

    result = subprocess.run(
        [sys.executable, "-c", script],
        capture_output=True,
        text=True,
        env=env,
        timeout=60,
    )

    assert result.returncode == 1
    assert "STILL RUNNING" not in result.stdout
    record = json.loads(result.stdout.splitlines()[0])
    assert record["level"] == "fatal"
    assert record["message"] == "worker gave up"


def test_compose_renders_without_writing(store, buffer):
    text = Logger(store).compose("debug", "x", 1)

    assert json.loads(text)["level"] == "debug"
    assert json.loads(text)["message"] == "x 1"
    assert buffer.getvalue() == ""


# =============================================================================
# Module-level surface
# =============================================================================
def test_module_functions_use_default_store(buffer):
    envelog.log_writer(buffer)
    envelog.set_configs(envelog.Configs(log_level="debug"))

    envelog.debug("from module")
    envelog.trace("filtered")

    assert [r["message"] for r in _records(buffer)] == ["from module"]
    assert envelog.get_settings().log_level is Level.DEBUG


def test_module_functions_trace_real_caller(buffer):
    envelog.log_writer(buffer)
    envelog.enable_trace_caller()

    envelog.info("traced")

    assert _records(buffer)[0]["function"] == "test_module_functions_trace_real_caller"


def test_module_compose_record_traces_real_caller():
    envelog.enable_trace_caller()

    text = envelog.compose_record("info", "x")

    assert json.loads(text)["function"] == "test_module_compose_record_traces_real_caller"


def test_default_output_is_stdout(capsys):
    envelog.info("hello")

    assert json.loads(capsys.readouterr().out)["message"] == "hello"


# =============================================================================
# Concurrency
# =============================================================================
def test_concurrent_logging_produces_whole_records(store, buffer):
    log = Logger(store)

    def worker(n):
        for i in range(100):
            log.info({"worker": n, "i": i})

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    records = _records(buffer)
    assert len(records) == 800
    assert {(r["message"]["worker"], r["message"]["i"]) for r in records} == {
        (n, i) for n in range(8) for i in range(100)
    }
