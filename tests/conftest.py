# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025 Scipp contributors (https://github.com/scipp)
import logging

import pytest
import structlog

from ess.buffer.policy import POLICY_ENV_VAR


@pytest.fixture(autouse=True)
def _no_policy_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a policy file configured in the developer's shell out of the tests."""
    monkeypatch.delenv(POLICY_ENV_VAR, raising=False)


@pytest.fixture
def restore_logging():
    """Undo global logging changes made by configure_logging."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()
