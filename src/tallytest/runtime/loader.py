#
# src/tallytest/runtime/loader.py
#
"""
Executes a single test file with the run environment bound into its scope.

Runs while stdout is being captured, so nothing here logs; the recorder
reports file execution around it.
"""

import runpy
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from tallytest.exceptions import TestFileNotFoundError

if TYPE_CHECKING:
    from tallytest.runtime.recorder import Recorder

RECORDER_NAME = "tester"
ENV_NAME = "env"
ENTRY_POINT = "run_suite"
RUN_NAME = "__tallytest__"


def execute_test_file(path: str | Path, recorder: "Recorder", env: Mapping[str, Any]) -> dict[str, Any]:
    """
    Runs a test file and returns its resulting globals.

    Every environment key becomes a global of the file, `tester` is the
    recorder and `env` is a read-only view of the environment. If the file
    defines a callable `run_suite`, it is then called as
    `run_suite(tester, env)`.

    Raises:
        TestFileNotFoundError: If `path` is not an existing file.
    """
    path = Path(path)
    if not path.is_file():
        raise TestFileNotFoundError(path)

    env_view = MappingProxyType(dict(env))
    init_globals: dict[str, Any] = dict(env)
    init_globals[RECORDER_NAME] = recorder
    init_globals[ENV_NAME] = env_view

    namespace = runpy.run_path(str(path), init_globals=init_globals, run_name=RUN_NAME)

    entry = namespace.get(ENTRY_POINT)
    if callable(entry):
        entry(recorder, env_view)
    return namespace


# 🔼⚙️
