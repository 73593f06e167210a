"""
Admin Session Model
"""

from backoffice.extensions import db
from backoffice.models.admin_user import utcnow


class AdminSession(db.Model):
    """Server-side record of one signed-in browser.

    Only the sha256 digest of the token is stored; the raw token lives in
    the visitor's cookie.
    """
    __tablename__ = 'admin_sessions'
    
    id = db.Column(db.Integer, primary_key=True)
    admin_user_id = db.Column(db.Integer,
                              db.ForeignKey('admin_users.id', ondelete='CASCADE'),
                              nullable=False, index=True)
    token_digest = db.Column(db.String(64), unique=True, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    last_seen_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)
    
    admin_user = db.relationship('AdminUser', back_populates='sessions')
    
    def is_expired(self, now=None):
        return (now or utcnow()) >= self.expires_at
    
    def __repr__(self):
        return f'<AdminSession user:{self.admin_user_id} expires:{self.expires_at}>'
