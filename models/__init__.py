# models/__init__.py

from .user import User, UserRole, Role, is_judge_eligible, is_organizer
from .team import Team, TeamMember
from .competition import Competition
from .criterion import Criterion
from .submission import Submission
from .judge import Judge
from .score import Score
from .audit_log import AuditLog
from .xp_event import XpEvent
