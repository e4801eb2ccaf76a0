from __future__ import annotations

import pytest

_ENV_VARS = (
    "REGEXPARSE_CONFIG",
    "REGEX_PATTERN",
    "INCLUDE_ALL_GROUPS",
    "REGEX_ENGINE",
    "REGEX_FLAGS",
    "REGEX_TIMEOUT",
    "OUTPUT_FORMAT",
    "LOG_LEVEL",
    "CONSOLE_LEVEL",
    "LOG_FILE",
    "VERBOSE",
    "DEBUG",
    "PLAIN_CONSOLE_LOGS",
    "BUILD_VERSION",
)


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
