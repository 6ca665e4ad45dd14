class PowerOpsException(Exception):
    """Base exception for everything raised by vmwait. Message is printed to the user by the command line."""

    def __init__(self, message):
        super(PowerOpsException, self).__init__(message)
        self.message = message


class NotConnectedError(PowerOpsException):
    """No session to the requested vCenter server is registered."""


class NotFoundError(PowerOpsException):
    """No virtual machine matches the requested identity."""


class InvalidWaitSpec(PowerOpsException):
    """Wait configuration was rejected before any command was sent."""


class ProbeError(PowerOpsException):
    """Guest probe failed and the wait was configured to escalate failures."""

    def __init__(self, message, condition=None, cause=None):
        super(ProbeError, self).__init__(message)
        self.condition = condition
        self.cause = cause


class WaitTimeoutError(PowerOpsException, TimeoutError):
    """Raised when the wait exceeds its maximum duration or number of polls."""

    def __init__(self, message, elapsed=0, polls=0, pending=None):
        super(WaitTimeoutError, self).__init__(message)
        self.elapsed = elapsed
        self.polls = polls
        self.pending = pending or []
