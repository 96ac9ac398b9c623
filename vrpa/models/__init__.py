# Models package
from .device import Device
from .team_member import TeamMember
from .ping_history import PingHistory
from .email_template import EmailTemplate
from .user import User

__all__ = ['Device', 'TeamMember', 'PingHistory', 'EmailTemplate', 'User']
