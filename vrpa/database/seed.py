"""
Default records created on first start
"""

import uuid

import structlog
from sqlalchemy.orm import Session

from vrpa.core.config import settings
from vrpa.core.security import hash_password
from vrpa.models.email_template import EmailTemplate
from vrpa.models.team_member import TeamMember
from vrpa.models.user import User
from vrpa.services.email import DEFAULT_TEMPLATE

logger = structlog.get_logger(__name__)

DEFAULT_TEAM_MEMBERS = [
    ("John Smith", "john.smith@company.com"),
    ("Sarah Johnson", "sarah.johnson@company.com"),
    ("Mike Chen", "mike.chen@company.com"),
    ("Emily Davis", "emily.davis@company.com"),
]

def seed_defaults(session: Session):
    """Create the admin user, default team members and email template if missing"""
    if session.query(User).count() == 0:
        session.add(User(
            id=str(uuid.uuid4()),
            username=settings.default_admin_username,
            password_hash=hash_password(settings.default_admin_password),
            role="admin"
        ))
        logger.warning("Initial admin user created, change its password after first login",
                       username=settings.default_admin_username)

    if session.query(TeamMember).count() == 0:
        for name, email in DEFAULT_TEAM_MEMBERS:
            session.add(TeamMember(id=str(uuid.uuid4()), name=name, email=email))
        logger.info("Default team members created", count=len(DEFAULT_TEAM_MEMBERS))

    if session.get(EmailTemplate, 1) is None:
        session.add(EmailTemplate(id=1, body=DEFAULT_TEMPLATE))

    session.commit()
