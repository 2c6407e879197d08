# marketplace/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from marketplace.domain.errors import ConcurrencyConflict
from marketplace.utils.settings import STATUS_UPDATE_MAX_ATTEMPTS


def conflict_retry(attempts: int = STATUS_UPDATE_MAX_ATTEMPTS):
    #ponawia cala jednostke pracy gdy optimistic locking przegra wyscig
    #(kazda proba startuje od swiezego odczytu po rollbacku)
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=0.5),
        retry=retry_if_exception_type(ConcurrencyConflict),
    )
