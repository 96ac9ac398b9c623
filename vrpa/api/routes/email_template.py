"""
Email template endpoints
"""

from fastapi import APIRouter, Depends
import structlog

from vrpa.api.deps import get_current_user, get_repositories
from vrpa.repositories.base import Repositories
from vrpa.schemas.misc import EmailTemplatePayload

logger = structlog.get_logger(__name__)
router = APIRouter(dependencies=[Depends(get_current_user)])

@router.get("/email-template", response_model=EmailTemplatePayload)
def get_email_template(repos: Repositories = Depends(get_repositories)):
    return EmailTemplatePayload(template=repos.email_template.get())

@router.put("/email-template", response_model=EmailTemplatePayload)
def update_email_template(payload: EmailTemplatePayload, repos: Repositories = Depends(get_repositories)):
    """Replace the email template wholesale"""

    repos.email_template.put(payload.template)
    repos.commit()

    logger.info("Email template updated", length=len(payload.template))
    return payload
