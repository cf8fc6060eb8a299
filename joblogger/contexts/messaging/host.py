"""
Native messaging host process loop.

The browser starts the host with a pipe on stdin/stdout, sends framed
requests and reads framed responses. Requests are handled one at a time:
read, dispatch, write, repeat. The host exits when the browser closes stdin.

Run directly:

    $ python -m joblogger.contexts.messaging.host
    $ joblogger-host
"""

import sys
from enum import Enum
from typing import BinaryIO, Optional

from joblogger.contexts.messaging.dispatcher import MessageDispatcher
from joblogger.contexts.messaging.framing import read_message, write_message
from joblogger.contexts.messaging.logger import (
    _log_debug,
    _log_exception,
    log_session_end,
    setup_host_logger,
)
from joblogger.utils.error_log import log_error


class HostState(Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    TERMINATED = "terminated"


class NativeMessagingHost:
    """
    Sequential read-dispatch-write loop over a pair of binary streams.

    Attributes:
        state: Current loop state
        handled: Number of requests answered so far
    """

    def __init__(
        self,
        input_stream: BinaryIO,
        output_stream: BinaryIO,
        dispatcher: Optional[MessageDispatcher] = None,
    ):
        self.input_stream = input_stream
        self.output_stream = output_stream
        self.dispatcher = dispatcher or MessageDispatcher()
        self.state = HostState.IDLE
        self.handled = 0

    def step(self) -> bool:
        """
        Handle one request.

        Returns:
            False once the input stream has no more messages
        """
        message = read_message(self.input_stream)
        if message is None:
            return False

        self.state = HostState.PROCESSING
        response = self.dispatcher.process_message(message)
        write_message(self.output_stream, response)
        self.handled += 1
        self.state = HostState.IDLE
        return True

    def run(self) -> int:
        """
        Serve requests until the input stream closes.

        Anything that escapes a step (in practice, a failed write to a peer
        that went away) is recorded in the error log and ends the loop.

        Returns:
            Number of requests handled
        """
        try:
            while self.step():
                pass
        except Exception as e:
            _log_exception("Host loop failed")
            log_error(e, context="host loop")
        finally:
            self.state = HostState.TERMINATED
            log_session_end(self.handled)

        return self.handled


def main() -> None:
    """Console entry point: serve on this process's stdin/stdout."""
    try:
        setup_host_logger()
    except OSError as e:
        # Log directory unavailable; keep loguru's default stderr sink
        log_error(e, context="logger setup")

    _log_debug("Host started")
    NativeMessagingHost(sys.stdin.buffer, sys.stdout.buffer).run()


if __name__ == "__main__":
    main()
