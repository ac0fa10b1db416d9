"""
Editor resolution and launch.

Editor detection (in order of preference):
  1. ASYNCSTATUS_EDITOR environment variable
  2. GIT_EDITOR environment variable
  3. VISUAL environment variable
  4. EDITOR environment variable
  5. EDITOR from config.env
  6. git config core.editor (local, then global)
  7. git var GIT_EDITOR (git's own fallback, typically vi)
  8. First of vi, vim, nano found on PATH
"""

import logging
import os
import shlex
import shutil
import subprocess
from typing import Callable

from asyncstatus.lib.errors import EditorLaunchError

logger = logging.getLogger(__name__)

EDITOR_ENV_VARS = ("ASYNCSTATUS_EDITOR", "GIT_EDITOR", "VISUAL", "EDITOR")
FALLBACK_EDITORS = ("vi", "vim", "nano")
GIT_TIMEOUT = 10

EditorResolver = Callable[[], str | None]


def _git_output(args: list[str]) -> str:
    """Run a git query, returning stripped stdout or "" on any failure."""
    try:
        result = subprocess.run(
            ["git"] + args,
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug(f"[EDITOR] git {' '.join(args)} failed: {e}")
        return ""
    if result.returncode != 0:
        return ""
    return result.stdout.strip()


def git_config_editor() -> str:
    """core.editor from git config, local scope first, then global."""
    for scope in ([], ["--global"]):
        editor = _git_output(["config"] + scope + ["--get", "core.editor"])
        if editor:
            return editor
    return ""


def git_var_editor() -> str:
    """Git's final editor choice."""
    return _git_output(["var", "GIT_EDITOR"])


def resolve_editor(environ: dict | None = None, config_editor: str | None = None) -> str | None:
    """Return the editor command to use, or None if nothing is available."""
    environ = os.environ if environ is None else environ

    for var in EDITOR_ENV_VARS:
        editor = environ.get(var, "").strip()
        if editor:
            logger.debug(f"[EDITOR] using {var}={editor}")
            return editor

    if config_editor:
        logger.debug(f"[EDITOR] using config EDITOR={config_editor}")
        return config_editor

    editor = git_config_editor() or git_var_editor()
    if editor:
        logger.debug(f"[EDITOR] using git editor {editor}")
        return editor

    for candidate in FALLBACK_EDITORS:
        if shutil.which(candidate):
            logger.debug(f"[EDITOR] falling back to {candidate}")
            return candidate

    return None


def run_editor(path: str, resolver: EditorResolver = resolve_editor) -> int:
    """Open path in the user's editor and block until it exits.

    The editor inherits the terminal. There is no timeout.

    Returns:
        The editor's exit code

    Raises:
        EditorLaunchError: if no editor is available or it cannot be started
    """
    editor = resolver()
    if not editor:
        raise EditorLaunchError(
            "no editor found. Please install vi, vim, or nano, or set "
            "ASYNCSTATUS_EDITOR/EDITOR/VISUAL/GIT_EDITOR environment variable"
        )

    try:
        cmd = shlex.split(editor)
    except ValueError as e:
        raise EditorLaunchError(f"cannot parse editor command '{editor}': {e}") from e
    if not cmd:
        raise EditorLaunchError(f"empty editor command '{editor}'")

    logger.info(f"[EDITOR] launching {cmd[0]} on {path}")
    try:
        result = subprocess.run(cmd + [path])
    except OSError as e:
        raise EditorLaunchError(f"failed to start editor '{editor}': {e}") from e
    return result.returncode
