"""
Admin User Model
"""

from datetime import datetime, timezone

from werkzeug.security import generate_password_hash, check_password_hash

from backoffice.extensions import db


def utcnow():
    """Naive UTC timestamp; SQLite drops tzinfo on the way back."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class AdminUser(db.Model):
    """Administrative principal allowed into the admin namespace"""
    __tablename__ = 'admin_users'
    
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_digest = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)
    last_sign_in_at = db.Column(db.DateTime)
    
    sessions = db.relationship('AdminSession', back_populates='admin_user',
                               lazy='dynamic', passive_deletes=True)
    
    @staticmethod
    def normalize_email(email):
        return (email or '').strip().lower()
    
    def set_password(self, password):
        """Replace the stored digest. The plaintext is never kept."""
        self.password_digest = generate_password_hash(password, method='pbkdf2:sha256')
    
    def check_password(self, password):
        if not self.password_digest:
            return False
        return check_password_hash(self.password_digest, password)
    
    def __repr__(self):
        return f'<AdminUser {self.email}>'
