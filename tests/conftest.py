"""Pytest fixtures for adb-plugin tests."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from hypothesis import HealthCheck, Phase, Verbosity, settings

_TEST_BASE_DIR = Path(tempfile.mkdtemp(prefix="adb-plugin-tests-"))
os.environ["ADB_PLUGIN_DATA_DIR"] = str(_TEST_BASE_DIR / "data")
os.environ["ADB_PLUGIN_CONFIG_DIR"] = str(_TEST_BASE_DIR / "config")

from adb_plugin.channel import PluginRegistrar  # noqa: E402
from adb_plugin.debug_log import clear_log_buffer, log  # noqa: E402
from adb_plugin.plugin import AdbPlugin, register_with_registrar  # noqa: E402

if TYPE_CHECKING:
    from collections.abc import Generator


settings.register_profile(
    "ci",
    suppress_health_check=[HealthCheck.function_scoped_fixture],
    max_examples=100,
    deadline=None,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
)
settings.register_profile(
    "dev",
    suppress_health_check=[HealthCheck.function_scoped_fixture],
    max_examples=20,
    deadline=None,
)
settings.register_profile(
    "debug",
    suppress_health_check=[HealthCheck.function_scoped_fixture],
    max_examples=10,
    verbosity=Verbosity.verbose,
    deadline=None,
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


@pytest.fixture(autouse=True)
def _mock_platform_system(monkeypatch, request):
    """Handle @pytest.mark.mock_platform_system("Windows") marker."""
    marker = request.node.get_closest_marker("mock_platform_system")
    if marker:
        target_platform = marker.args[0]
        monkeypatch.setattr("platform.system", lambda: target_platform)


@pytest.fixture(autouse=True)
def _clean_log_buffer() -> Generator[None, None, None]:
    root_level = logging.getLogger().level
    clear_log_buffer()
    yield
    clear_log_buffer()
    log.level = logging.INFO
    logging.getLogger().setLevel(root_level)


@pytest.fixture
def plugin() -> AdbPlugin:
    return AdbPlugin()


@pytest.fixture
def registrar() -> PluginRegistrar:
    registrar = PluginRegistrar()
    register_with_registrar(registrar)
    return registrar
