import enum

from extensions import db
from sqlalchemy import CheckConstraint


class Role(enum.Enum):
    ADMIN = 'admin'
    ORGANIZER = 'organizer'
    MODERATOR = 'moderator'
    JUDGE = 'judge'
    MENTOR = 'mentor'
    SPONSOR = 'sponsor'
    PARTICIPANT = 'participant'
    VIEWER = 'viewer'


JUDGE_CAPABLE_ROLES = frozenset({Role.JUDGE, Role.ADMIN})
ORGANIZER_ROLES = frozenset({Role.ORGANIZER, Role.ADMIN})

_ROLE_VALUES = ", ".join(f"'{r.value}'" for r in Role)


def is_judge_eligible(roles):
    return bool(JUDGE_CAPABLE_ROLES & frozenset(roles))


def is_organizer(roles):
    return bool(ORGANIZER_ROLES & frozenset(roles))


class User(db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    handle = db.Column(db.String(50), unique=True, nullable=True, index=True)
    email = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())

    role_rows = db.relationship('UserRole', backref='user', lazy='selectin', cascade="all, delete-orphan")
    memberships = db.relationship('TeamMember', backref='user', lazy=True, cascade="all, delete-orphan")

    @property
    def roles(self):
        return frozenset(Role(row.role) for row in self.role_rows)

    def grant(self, *roles):
        current = set(self.roles)
        for role in roles:
            if role not in current:
                self.role_rows.append(UserRole(role=role.value))
                current.add(role)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'handle': self.handle,
        }


class UserRole(db.Model):
    __tablename__ = 'user_roles'
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True)
    role = db.Column(db.String(20), primary_key=True)

    __table_args__ = (
        CheckConstraint(f"role IN ({_ROLE_VALUES})", name="check_user_role"),
    )
