"""
Team member endpoints
"""

from fastapi import APIRouter, Depends, status
from typing import List
import uuid
import structlog

from vrpa.api.deps import get_current_user, get_repositories
from vrpa.core.errors import NotFoundError
from vrpa.repositories.base import Repositories
from vrpa.schemas.team_member import TeamMember, TeamMemberCreate, TeamMemberUpdate
from vrpa.services.validation import validate_team_member

logger = structlog.get_logger(__name__)
router = APIRouter(dependencies=[Depends(get_current_user)])

@router.get("/team-members", response_model=List[TeamMember])
def get_team_members(repos: Repositories = Depends(get_repositories)):
    return repos.team_members.list()

@router.post("/team-members", response_model=TeamMember, status_code=status.HTTP_201_CREATED)
def create_team_member(member_data: TeamMemberCreate, repos: Repositories = Depends(get_repositories)):
    """Add a team member"""

    validate_team_member(member_data)
    member = TeamMember(
        id=str(uuid.uuid4()),
        name=member_data.name.strip(),
        email=member_data.email.strip()
    )
    repos.team_members.add(member)
    repos.commit()

    logger.info("Team member created", member_id=member.id, name=member.name)
    return member

@router.put("/team-members/{member_id}", response_model=TeamMember)
def update_team_member(
    member_id: str,
    member_data: TeamMemberUpdate,
    repos: Repositories = Depends(get_repositories)
):
    """Update a team member; existing checkouts keep the name they were made with"""

    member = repos.team_members.get(member_id)
    if member is None:
        raise NotFoundError("Team member", member_id)

    updated = member.model_copy(update=member_data.model_dump(exclude_unset=True, exclude_none=True))
    validate_team_member(TeamMemberCreate(name=updated.name, email=updated.email))
    updated = updated.model_copy(update={"name": updated.name.strip(), "email": updated.email.strip()})
    repos.team_members.save(updated)
    repos.commit()

    logger.info("Team member updated", member_id=member_id)
    return updated

@router.delete("/team-members/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_team_member(member_id: str, repos: Repositories = Depends(get_repositories)):
    """Remove a team member"""

    if not repos.team_members.delete(member_id):
        raise NotFoundError("Team member", member_id)
    repos.commit()

    logger.info("Team member deleted", member_id=member_id)
