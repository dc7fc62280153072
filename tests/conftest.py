#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Pytest bootstrap for local package imports and shared fixtures.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import sys
from pathlib import Path

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture
def quiet_config():
    """Registry configuration independent of the caller's environment."""
    from rpcmap.core.config import create_config

    return create_config(environ={}, rich_logging=False)


@pytest.fixture
def namespace_root():
    """The ``rpcmap`` logger, with handlers and level restored afterwards."""
    import logging

    root = logging.getLogger("rpcmap")
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield root
    root.handlers = saved_handlers
    root.setLevel(saved_level)
