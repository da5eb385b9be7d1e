""" Actions are the unit of execution handed to the host job framework.

Subclass BaseAction and provide a `_run_action()` method with your code.
The host drives three lifecycle entry points: invoke, error and halt.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from sfpermset.core.context import ActionContext
from sfpermset.core.error_handling import (
    ErrorDisposition,
    as_exception,
    classify_error,
    error_message,
)
from sfpermset.core.exceptions import ActionOptionsError

RETRY_REQUESTED = "retry_requested"
HALTED = "halted"


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix"""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class BaseAction:
    """BaseAction provides the core execution logic for an Action

    `action_options` declares the params the action understands, keyed by
    the name the host uses.  Options flagged as `required` are checked
    before `_run_action()` is called.
    """

    action_docs: str = ""
    action_options: dict = {}
    return_values: dict
    logger: logging.Logger
    options: dict
    context: ActionContext

    def __init__(
        self,
        params: Optional[Mapping] = None,
        context: Any = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.params = dict(params or {})
        self.context = ActionContext.parse(context)
        # dict of return_values handed back to the host
        self.return_values = {}

        if logger:
            self.logger = logger
        else:
            self._init_logger()

        self._init_options(self.params)

    def _init_logger(self):
        """Initializes self.logger"""
        self.logger = logging.getLogger(self.__class__.__module__)

    def _init_options(self, params):
        """Initializes self.options from the declared action_options"""
        self.options = {
            name: params.get(name) for name in self.action_options if name in params
        }

    def _validate_options(self):
        for name, config in self.action_options.items():
            if config.get("required") is True and not self.options.get(name):
                raise ActionOptionsError(f"{name} is required")

    def __call__(self) -> dict:
        self._validate_options()
        self._log_begin()
        self._run_action()
        return self.return_values

    def invoke(self) -> dict:
        return self()

    def _run_action(self):
        """Subclasses should override to provide their implementation"""
        raise NotImplementedError("Subclasses should provide their own implementation")

    def _log_begin(self):
        """Log the beginning of the action execution"""
        self.logger.info(f"Beginning action: {self.__class__.__name__}")

    def error(self) -> dict:
        """Decide whether the error the host reports should be retried.

        Retryable errors hand control back to the host's retry schedule;
        fatal errors are re-raised so the job fails."""
        err = self.params.get("error")
        if err is None:
            raise ActionOptionsError("error is required")
        self.logger.error(f"Error in {self._description()}: {error_message(err)}")

        if classify_error(err) is ErrorDisposition.FATAL:
            raise as_exception(err)

        self.logger.info("Retryable error detected, requesting retry")
        return {"status": RETRY_REQUESTED}

    def halt(self) -> dict:
        reason = self.params.get("reason")
        self.logger.info(f"{self._description()} halted ({reason})")
        return {"status": HALTED, "reason": reason, "halted_at": utc_timestamp()}

    def _description(self) -> str:
        return self.__class__.__name__
