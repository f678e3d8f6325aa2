import abc
import logging
from typing import Callable, Optional

from ..constants import PRO_PLANS

logger = logging.getLogger(__name__)

PlanLookup = Callable[[str], Optional[str]]


class EntitlementChecker(abc.ABC):
    """Decides whether a user may start a Pro-gated challenge."""

    @abc.abstractmethod
    def is_entitled(self, user_id: str, challenge_id: str) -> bool:
        pass


class PlanEntitlements(EntitlementChecker):
    """Entitled when the user's subscription plan is one of the Pro plans."""

    def __init__(self, plan_lookup: PlanLookup):
        self._plan_lookup = plan_lookup

    def is_entitled(self, user_id: str, challenge_id: str) -> bool:
        plan = (self._plan_lookup(user_id) or "").strip().lower()
        entitled = plan in PRO_PLANS
        logger.debug(f"User '{user_id}' on plan '{plan or 'none'}' entitled to '{challenge_id}': {entitled}")
        return entitled
