"""
Process-wide handlers for failures that escape the startup sequence
"""

import asyncio
import sys
import traceback
from typing import Callable, Optional


class FatalHandlers:
    """Log unhandled async failures and uncaught exceptions

    ``handle_async_exception`` is installed as the event loop's exception
    handler, ``handle_uncaught`` as ``sys.excepthook``. Both only record the
    failure unless ``terminate`` is set, in which case ``exit_func(1)`` runs
    after logging.
    """

    def __init__(
        self,
        logger=None,
        *,
        terminate: bool = False,
        exit_func: Callable[[int], None] = sys.exit,
    ):
        self.logger = logger
        self.terminate = terminate
        self.exit_func = exit_func
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._previous_loop_handler = None
        self._previous_excepthook = None
        self.installed = False

    def _record(self, message: str, error: Optional[BaseException]):
        try:
            if self.logger is not None:
                self.logger.error(message, exc_info=error)
                return
        except Exception as logging_error:
            print(f"Error logging {message}: {logging_error}", file=sys.stderr)

        print(message, file=sys.stderr)
        if error is not None:
            traceback.print_exception(type(error), error, error.__traceback__, file=sys.stderr)

    def handle_async_exception(self, loop, context: dict):
        error = context.get("exception")
        message = context.get("message", "Unhandled exception in event loop")
        self._record(f"Unhandled async failure: {message}", error)
        if self.terminate:
            loop.stop()
            self.exit_func(1)

    def handle_uncaught(self, exc_type, exc, tb):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc, tb)
            return
        self._record(f"Uncaught exception: {exc_type.__name__}: {exc}", exc)
        if self.terminate:
            self.exit_func(1)

    def install(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> "FatalHandlers":
        self._loop = loop or asyncio.get_running_loop()
        self._previous_loop_handler = self._loop.get_exception_handler()
        self._loop.set_exception_handler(self.handle_async_exception)

        self._previous_excepthook = sys.excepthook
        sys.excepthook = self.handle_uncaught
        self.installed = True
        return self

    def uninstall(self):
        if not self.installed:
            return
        self._loop.set_exception_handler(self._previous_loop_handler)
        sys.excepthook = self._previous_excepthook
        self.installed = False


def install_fatal_handlers(
    logger=None,
    *,
    loop: Optional[asyncio.AbstractEventLoop] = None,
    terminate: bool = False,
    exit_func: Callable[[int], None] = sys.exit,
) -> FatalHandlers:
    """Install both process-wide failure handlers, routing them to ``logger``"""
    return FatalHandlers(logger, terminate=terminate, exit_func=exit_func).install(loop)
