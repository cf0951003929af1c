# models/user.py
from werkzeug.security import generate_password_hash, check_password_hash
from datetime import datetime
from . import BaseModel
from .. import db


class Profile(BaseModel):
    """Staff profile, looked up by the authenticated user's id."""
    __tablename__ = 'profiles'

    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), nullable=True)
    role = db.Column(db.String(20), nullable=False, default='ATTENDANT')
    avatar = db.Column(db.String(500), nullable=True)
    active = db.Column(db.Boolean, default=True)
    specialty = db.Column(db.String(100), nullable=True)

    def __repr__(self):
        return f'<Profile {self.name} ({self.role})>'


class AuthAccount(BaseModel):
    """Password credentials for the SQL driver's sign-in endpoint."""
    __tablename__ = 'auth_accounts'

    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    last_login = db.Column(db.DateTime)

    _audit_columns = ('created_at', 'updated_at', 'password_hash', 'last_login')

    @property
    def password(self):
        raise AttributeError('password is not a readable attribute')

    @password.setter
    def password(self, password):
        self.password_hash = generate_password_hash(password)

    def verify_password(self, password):
        return check_password_hash(self.password_hash, password)

    def update_last_login(self):
        self.last_login = datetime.now()
        self.save()

    def __repr__(self):
        return f'<AuthAccount {self.email}>'


def init_admin_account(app):
    """Seed the first ADMIN account from configuration when none exists"""
    email = app.config.get('ADMIN_EMAIL')
    password = app.config.get('ADMIN_PASSWORD')
    if not email or not password:
        app.logger.info("No admin credentials configured, skipping account seed")
        return

    if AuthAccount.query.first() is not None:
        app.logger.info("Accounts already initialized")
        return

    account_id = 'u-admin'
    account = AuthAccount(id=account_id, email=email.lower())
    account.password = password
    profile = Profile(
        id=account_id,
        name=app.config.get('ADMIN_NAME') or email.split('@')[0],
        email=email.lower(),
        role='ADMIN',
        active=True
    )
    try:
        account.save()
        profile.save()
        app.logger.info(f"Admin account '{email}' created successfully")
    except Exception as e:
        app.logger.error(f"Error creating admin account '{email}': {str(e)}")
        raise
