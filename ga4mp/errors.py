from typing import Iterable, List, Optional

from ga4mp.constants import (
    EXIT_CODE_CONFIGURATION_ERROR,
    EXIT_CODE_FAILURE,
    EXIT_CODE_SUBMISSION_FAILED,
    EXIT_CODE_TRANSPORT_ERROR,
    EXIT_CODE_VALIDATION_ERROR,
)


class Ga4Error(Exception):
    """
    Generic ga4mp error.

    Args:
        message (str): The error message.
    """
    def __init__(self, message: str = "An error occurred while collecting analytics data."):
        self.message = message
        super().__init__(self.message)

    def get_exit_code(self) -> int:
        """
        Get the exit code associated with this error.

        Returns:
            int: The exit code.
        """
        return EXIT_CODE_FAILURE


class ValidationError(Ga4Error):
    """
    Error raised immediately when a value is rejected before submission.

    The object the value was given to is left unchanged.
    """
    def __init__(self, message: str = "Invalid value."):
        super().__init__(message)

    def get_exit_code(self) -> int:
        return EXIT_CODE_VALIDATION_ERROR


class LimitExceededError(ValidationError):
    """
    Error raised when adding an entity would exceed its per-request ceiling.

    Args:
        entity (str): What was being added, e.g. "user properties".
        limit (int): The ceiling that was hit.
    """
    def __init__(self, entity: str, limit: int):
        self.entity = entity
        self.limit = limit
        super().__init__(f"Can't add more than {limit} {entity}")


class MissingRequiredFieldsError(ValidationError):
    """
    Error raised by submit() when required request fields are absent.

    Args:
        fields (Iterable[str]): Names of the missing fields.
    """
    def __init__(self, fields: Iterable[str]):
        self.fields = sorted(fields)
        super().__init__(
            "Missing required field(s): {fields}\n"
            "Set a client id or a user id before submitting.".format(
                fields=", ".join(self.fields)
            )
        )


class AggregatedSubmissionError(Ga4Error):
    """
    Error raised once at the end of a submission in which problems were recorded.

    Args:
        problems (List[str]): Every problem recorded during the attempt, in order.
    """
    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        lines = "\n".join(f"  - {problem}" for problem in self.problems)
        super().__init__(
            f"Submission finished with {len(self.problems)} problem(s):\n{lines}"
        )

    def get_exit_code(self) -> int:
        return EXIT_CODE_SUBMISSION_FAILED


class TransportError(Ga4Error):
    """
    Error raised by a transport when no HTTP response could be obtained.
    """
    def get_exit_code(self) -> int:
        return EXIT_CODE_TRANSPORT_ERROR


class NetworkConnectionError(TransportError):
    """
    Error raised when there is a network connection issue.

    Args:
        reason (Optional[str]): The underlying error, if known.
    """

    def __init__(self, reason: Optional[str] = None,
                 message: str = "Network connection error: Unable to reach the collector."):
        self.message = message
        if reason:
            self.message += f" Details: {reason}"
        super().__init__(self.message)


class RequestTimeoutError(TransportError):
    """
    Error raised when a request times out.

    Args:
        message (str): The error message.
    """
    def __init__(self, message: str = "Request timed out: The collector did not respond in time."):
        super().__init__(message)


class ConfigurationError(Ga4Error):
    """
    Error raised when required configuration, such as credentials, is missing.
    """
    def get_exit_code(self) -> int:
        return EXIT_CODE_CONFIGURATION_ERROR
