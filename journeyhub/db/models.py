"""
Import every model module so Base.metadata is complete and relationships
resolve (create_all, Alembic autogenerate, scripts).
"""
from journeyhub.users.models import User  # noqa: F401
from journeyhub.journeys.models import Journey  # noqa: F401
from journeyhub.links.models import JourneyPublicLink  # noqa: F401
from journeyhub.shares.models import JourneyShare  # noqa: F401
from journeyhub.audit.models import AuditLog  # noqa: F401
from journeyhub.badges.models import DailyGoalBadge  # noqa: F401
