"""
Registered user model.
"""
from datetime import datetime
from flask_login import UserMixin
from digforweb.extensions import db, bcrypt
from digforweb.services.permissions import (
    ROLE_OFFICER, ROLE_VIEWER, normalize_role, permissions_for
)


class User(UserMixin, db.Model):
    """Application user with a single role (officer or viewer)."""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)

    # Authentication
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    # Profile
    name = db.Column(db.String(200), nullable=False)
    contact = db.Column(db.String(50))

    # Authorization
    role = db.Column(db.String(20), nullable=False, default=ROLE_VIEWER)

    # Status
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    # Bumped on API logout; tokens signed with an older value are rejected
    token_version = db.Column(db.Integer, default=0, nullable=False)

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    last_login = db.Column(db.DateTime)

    def set_password(self, password):
        """Hash and set user password."""
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        """Check if provided password matches hash."""
        return bcrypt.check_password_hash(self.password_hash, password)

    @property
    def permissions(self):
        return permissions_for(self.role)

    def is_officer(self):
        return normalize_role(self.role) == ROLE_OFFICER

    def is_viewer(self):
        return normalize_role(self.role) == ROLE_VIEWER

    @property
    def api_role(self):
        """Role name as spoken by the REST API."""
        return 'petugas' if self.is_officer() else normalize_role(self.role)

    def update_last_login(self):
        """Update last login timestamp."""
        self.last_login = datetime.utcnow()
        db.session.commit()

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'contact': self.contact or '',
            'role': self.api_role,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<User {self.email}>'
