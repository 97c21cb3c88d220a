import logging
from typing import List, Optional

from ga4mp.config.log_codes import SUBMIT_PROBLEM_RECORDED
from ga4mp.errors import AggregatedSubmissionError

logger = logging.getLogger(__name__)


class ErrorAggregator:
    """
    Collects problem descriptions during one submission attempt.

    Nothing is raised while recording; `raise_if_any` turns everything
    recorded into a single AggregatedSubmissionError.
    """

    def __init__(self):
        self._problems: List[str] = []

    def record(self, problem: str) -> None:
        logger.warning(SUBMIT_PROBLEM_RECORDED, extra={"problem": problem})
        self._problems.append(problem)

    @property
    def problems(self) -> List[str]:
        return list(self._problems)

    def has_problems(self) -> bool:
        return bool(self._problems)

    def __len__(self) -> int:
        return len(self._problems)

    def to_error(self) -> Optional[AggregatedSubmissionError]:
        if not self._problems:
            return None
        return AggregatedSubmissionError(self._problems)

    def raise_if_any(self) -> None:
        error = self.to_error()
        if error is not None:
            raise error
