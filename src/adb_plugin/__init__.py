"""adb-plugin: reports the host operating system version over the ``adb`` channel."""

from adb_plugin.plugin import CHANNEL_NAME, AdbPlugin, register_with_registrar

__version__ = "0.1.0"

__all__ = ["CHANNEL_NAME", "AdbPlugin", "register_with_registrar"]
