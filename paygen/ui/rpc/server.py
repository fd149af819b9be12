"""
Stdio transport for the JSON-RPC control surface.

One request per line on stdin, one response per line on stdout. Logging
goes to stderr so it never interleaves with responses. The loop ends
at EOF or after answering ``shutdown``.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from paygen.ui.rpc.dispatcher import Dispatcher

logger = logging.getLogger(__name__)


def serve(dispatcher: Dispatcher, stdin: TextIO | None = None, stdout: TextIO | None = None) -> int:
    """Run the line loop; returns the number of lines handled."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    handled = 0

    logger.info("RPC server listening on stdio")
    for line in stdin:
        response = dispatcher.handle_line(line)
        handled += 1
        if response is not None:
            stdout.write(response + "\n")
            stdout.flush()
        if dispatcher.shutdown_requested:
            logger.info("Shutdown requested")
            break

    logger.info("RPC server stopped after %d lines", handled)
    return handled
