"""
Per-plan record limits
"""
import math

from followuply.constants import PLAN_LIMITS
from followuply.errors import ValidationError
from followuply.services.base import RecordGateway
from followuply.services.profile_gateway import ProfileGateway


def plan_limit(plan: str, entity: str) -> float:
    limits = PLAN_LIMITS.get(plan, PLAN_LIMITS["free"])
    return limits.get(entity, math.inf)


async def ensure_within_plan(profiles: ProfileGateway, gateway: RecordGateway, user_id: str, entity: str):
    """Raise ValidationError when one more `entity` would exceed the user's plan"""
    profile = await profiles.ensure(user_id)
    limit = plan_limit(profile.plan, entity)
    if limit == math.inf:
        return

    current = await gateway.count(user_id)
    if current >= limit:
        raise ValidationError([
            f"You've reached the {profile.plan} plan limit of {int(limit)} {entity}. "
            "Upgrade to add more."
        ])
