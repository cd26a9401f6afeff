"""
debug_trace.py

Trace instrumentation for following pointer gestures and canvas edits.
Enable with the environment variable BLOCKCANVAS_TRACE=1; set
BLOCKCANVAS_TRACE_FILE to also append the trace to a file.
"""

import os
import sys
import traceback
from datetime import datetime
from functools import wraps

DEBUG_TRACE = os.environ.get("BLOCKCANVAS_TRACE", "") == "1"

# Pointer-move traces fire on every mouse move (very verbose)
TRACE_MOVES = os.environ.get("BLOCKCANVAS_TRACE_MOVES", "") == "1"

# Log file (None for stderr only)
LOG_FILE = os.environ.get("BLOCKCANVAS_TRACE_FILE") or None

_log_file = None


def _get_log_file():
    global _log_file, LOG_FILE
    if LOG_FILE and _log_file is None:
        try:
            _log_file = open(LOG_FILE, "a", encoding="utf-8")
        except OSError as e:
            print(f"[debug_trace] cannot open {LOG_FILE}: {e}", file=sys.stderr)
            # Fall back to stderr only; do not retry on every trace
            LOG_FILE = None
    return _log_file


def trace(msg: str, category: str = "INFO"):
    """Print a trace message with timestamp."""
    if not DEBUG_TRACE:
        return
    if category == "MOVE" and not TRACE_MOVES:
        return

    timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
    line = f"[{timestamp}] [{category}] {msg}"

    print(line, file=sys.stderr, flush=True)

    log_file = _get_log_file()
    if log_file:
        log_file.write(line + "\n")
        log_file.flush()


def trace_exception(msg: str = "Exception"):
    """Print exception info."""
    if not DEBUG_TRACE:
        return
    trace(f"{msg}: {traceback.format_exc()}", "ERROR")


def trace_call(category: str = "CALL"):
    """Decorator to trace function calls."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if not DEBUG_TRACE:
                return func(*args, **kwargs)
            func_name = func.__qualname__
            trace(f">>> {func_name}", category)
            try:
                result = func(*args, **kwargs)
                trace(f"<<< {func_name}", category)
                return result
            except Exception as e:
                trace(f"!!! {func_name} raised {type(e).__name__}: {e}", "ERROR")
                raise
        return wrapper
    return decorator


def close_log():
    """Close log file."""
    global _log_file
    if _log_file:
        _log_file.close()
        _log_file = None
