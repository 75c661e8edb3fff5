"""
Root test configuration.

The event logger and the config singleton are created at import time, so
their database paths are pointed at a temporary directory before any
project module is imported.
"""
import os
import tempfile
from pathlib import Path

_TMP = Path(tempfile.mkdtemp(prefix="berkas_tests_"))
os.environ["BERKAS_DATABASE__LOGGING"] = str(_TMP / "logs.db")
os.environ["BERKAS_DATABASE__BERKAS"] = str(_TMP / "berkas.db")
os.environ["XDG_CONFIG_HOME"] = str(_TMP / "xdg")
