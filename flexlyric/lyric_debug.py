# Copyright 2024 PeppyMeter for Volumio by 2aCD
# Copyright 2025 Volumio 4 adaptation by Just a Nerd
# Debug Logging - shared by all lyric modules
#
# This file is part of FlexLyric

import datetime

DEBUG_LOG_FILE = '/tmp/flexlyric_debug.log'

# Levels: off, basic, verbose, trace
# Default to off until config is loaded
DEBUG_LEVEL_CURRENT = "off"

# Debug trace switches - keys match the config key suffix
# (e.g., "clock" for debug.trace.clock)
DEBUG_TRACE = {
    "clock": False,
    "layout": False,
    "render": False,
    "animation": False,
    "state": False,
}

DEBUG_LEVELS = ("off", "basic", "verbose", "trace")


def init_debug(level, trace_dict=None):
    """Initialize debug settings from parsed config."""
    global DEBUG_LEVEL_CURRENT
    DEBUG_LEVEL_CURRENT = level if level in DEBUG_LEVELS else "off"
    for key, value in (trace_dict or {}).items():
        DEBUG_TRACE[key] = bool(value)


def log_debug(msg, level="basic", component=None):
    """Append msg to the debug log if level and component switch allow it.

    trace messages also need their component (clock, layout, render,
    animation, state) switched on in DEBUG_TRACE.
    """
    current = DEBUG_LEVELS.index(DEBUG_LEVEL_CURRENT)
    required = DEBUG_LEVELS.index(level) if level in DEBUG_LEVELS else 1
    if current == 0 or required > current:
        return
    if level == "trace" and component and not DEBUG_TRACE.get(component, False):
        return

    try:
        ts = datetime.datetime.now().strftime('%H:%M:%S.%f')[:-3]
        with open(DEBUG_LOG_FILE, 'a') as f:
            f.write(f"[{ts}] {msg}\n")
    except OSError:
        pass


def clear_debug_log():
    """Truncate the debug log on a fresh start."""
    if DEBUG_LEVEL_CURRENT == "off":
        return
    try:
        open(DEBUG_LOG_FILE, 'w').close()
    except OSError:
        pass
