"""
Git client infrastructure for gitnapped.

Wraps the handful of read-only git queries a probe needs: the commit
log, submodule status, tracked files and work-tree detection. Failures
never raise; they come back as None (or an empty list) so callers can
count the repository as an empty contribution.
"""

import subprocess
from typing import List, Optional, Sequence, Tuple
import logging
import os

logger = logging.getLogger(__name__)

LOG_FORMAT = "%h %ad %s"


class GitClient:
    """
    Abstraction over the git queries used to probe a repository.

    Example:
        client = GitClient()
        lines = client.log_lines("/path/to/repo", since="2024-01-01", until="2024-02-01")
        if lines is not None:
            print(f"{len(lines)} commits")
    """

    def __init__(self, git_binary: str = "git", timeout: Optional[int] = None):
        """
        Initialize GitClient.

        Args:
            git_binary: Name or path of the git executable
            timeout: Command timeout in seconds (None waits indefinitely)
        """
        self.git_binary = git_binary
        self.timeout = timeout

    def _run(self, path: str, args: Sequence[str]) -> Tuple[Optional[str], int]:
        """
        Run `git -C <path> <args...>`.

        Returns:
            Tuple of (stdout, returncode); stdout is None when git could
            not be executed at all
        """
        cmd = [self.git_binary, "-C", os.path.expanduser(path), *args]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired:
            logger.warning(f"Git command timed out: {' '.join(cmd)}")
            return None, -1
        except OSError as e:
            logger.warning(f"Git command failed: {' '.join(cmd)} - {e}")
            return None, -1

        logger.debug(f"git {' '.join(args)} in {path}: exit {result.returncode}")
        if result.returncode != 0 and result.stderr:
            logger.debug(f"git stderr: {result.stderr.strip()}")

        return result.stdout, result.returncode

    def is_work_tree(self, path: str) -> bool:
        """Check if path is inside a git work tree."""
        output, code = self._run(path, ["rev-parse", "--is-inside-work-tree"])
        return code == 0 and (output or "").strip() == "true"

    def log_lines(
        self,
        path: str,
        since: Optional[str] = None,
        until: Optional[str] = None,
        author: Optional[str] = None,
        annotation: Optional[str] = None
    ) -> Optional[List[str]]:
        """
        Get one line per commit: "<short-hash> <iso-timestamp> <subject>".

        Args:
            path: Path to git repository
            since: Only commits after this date/time
            until: Only commits before this date/time
            author: Only commits whose author matches this pattern
            annotation: Text inserted before the subject (e.g. "[submodule lib]")

        Returns:
            List of log lines, or None if the query failed
        """
        pretty = LOG_FORMAT
        if annotation:
            # git expands % in --pretty formats
            pretty = f"%h %ad {annotation.replace('%', '%%')} %s"

        args = ["log", f"--pretty=format:{pretty}", "--date=iso-strict"]
        if author:
            args.append(f"--author={author}")
        if since:
            args.append(f"--since={since}")
        if until:
            args.append(f"--until={until}")

        output, code = self._run(path, args)
        if output is None or code != 0:
            return None
        return [line for line in output.splitlines() if line.strip()]

    def submodule_paths(self, path: str) -> List[str]:
        """
        List the relative paths of the submodules declared by a repository.

        Returns:
            Submodule paths; empty if there are none or the query failed
        """
        output, code = self._run(path, ["submodule", "status"])
        if output is None or code != 0:
            return []

        paths = []
        for line in output.splitlines():
            parts = line.split()
            if len(parts) >= 2:
                paths.append(parts[1])
        return paths

    def tracked_files(self, path: str) -> Optional[List[str]]:
        """
        List files tracked by git, relative to the repository root.

        Returns:
            List of relative paths, or None if the query failed
        """
        output, code = self._run(path, ["ls-files", "-z"])
        if output is None or code != 0:
            return None
        return [name for name in output.split("\0") if name]
