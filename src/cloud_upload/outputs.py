"""Structured outputs for the GitHub Actions caller."""

from __future__ import annotations

import logging
import os
import uuid

logger = logging.getLogger(__name__)


class GitHubOutputs:
    """Append outputs to the file named by ``$GITHUB_OUTPUT``.

    Implements the ``OutputSink`` protocol. Values use the multi-line
    ``name<<DELIMITER`` form so JSON payloads survive unchanged. Without an
    output file (local runs) the values are only logged.
    """

    def __init__(self, path: str | None = None) -> None:
        self._path = path if path is not None else os.environ.get("GITHUB_OUTPUT", "")

    def set_output(self, name: str, value: str) -> None:
        if not self._path:
            logger.info("output %s=%s", name, value)
            return

        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        with open(self._path, "a", encoding="utf-8") as fh:
            fh.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
        logger.debug("wrote output %s", name)
