# Repositories package
from .base import (
    DeviceRepository,
    TeamMemberRepository,
    PingHistoryRepository,
    EmailTemplateRepository,
    Repositories,
)
from .memory import InMemoryRepositories
from .sql import SqlRepositories

__all__ = [
    'DeviceRepository', 'TeamMemberRepository', 'PingHistoryRepository',
    'EmailTemplateRepository', 'Repositories', 'InMemoryRepositories', 'SqlRepositories',
]
