import os

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from werkzeug.utils import secure_filename

from .. import db, logger
from ..errors import AuthenticationError, BackendError, BackendUnavailable
from ..models import Client, Appointment, Transaction, ProcedurePackage, Deal, Supplier
from ..models.user import AuthAccount, Profile
from . import RecordGateway, FileStore, AuthGateway

MODELS_BY_TABLE = {
    model.__tablename__: model
    for model in (Client, Appointment, Transaction, ProcedurePackage, Deal, Supplier, Profile)
}


def _wrap_database_error(e, action):
    logger.error(f"Database error while trying to {action}: {str(e)}")
    if isinstance(e, OperationalError):
        return BackendUnavailable("Não foi possível conectar ao banco de dados.")
    return BackendError(f"Database error while trying to {action}")


class SqlRecordGateway(RecordGateway):
    """Entity table stored through the Flask-SQLAlchemy models"""

    def __init__(self, table, ordering=None):
        super().__init__(table)
        self.model = MODELS_BY_TABLE[table]
        self.ordering = ordering

    def get_all(self):
        try:
            query = self.model.query
            if self.ordering:
                column, descending = self.ordering
                column = getattr(self.model, column)
                query = query.order_by(column.desc() if descending else column.asc())
            return [row.to_record() for row in query.all()]
        except SQLAlchemyError as e:
            db.session.rollback()
            raise _wrap_database_error(e, f"load {self.table}")

    def upsert(self, record):
        try:
            row = db.session.merge(self.model.from_record(record))
            db.session.commit()
            logger.info(f"Upserted {self.table} row {row.id}")
            return row.to_record()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise _wrap_database_error(e, f"save {self.table} row {record.get('id')}")

    def delete(self, record_id):
        try:
            row = self.model.get_by_id(record_id)
            if row is not None:
                row.delete()
                logger.info(f"Deleted {self.table} row {record_id}")
        except SQLAlchemyError as e:
            raise _wrap_database_error(e, f"delete {self.table} row {record_id}")


class LocalFileStore(FileStore):
    """Uploads kept on local disk and served by the media blueprint"""

    def __init__(self, app):
        self.root = app.config['UPLOAD_FOLDER']
        self.url_prefix = app.config.get('MEDIA_URL_PREFIX', '/media').rstrip('/')

    def upload(self, bucket, path, stream, content_type=None):
        parts = [secure_filename(part) for part in [bucket] + path.split('/')]
        parts = [part for part in parts if part]
        target = os.path.join(self.root, *parts)
        try:
            os.makedirs(os.path.dirname(target), exist_ok=True)
            with open(target, 'wb') as fh:
                fh.write(stream.read())
        except OSError as e:
            logger.error(f"Upload to {target} failed: {str(e)}")
            raise BackendError("Upload failed")
        logger.info(f"Stored upload {'/'.join(parts)}")
        return f"{self.url_prefix}/{'/'.join(parts)}"


class SqlAuthGateway(AuthGateway):

    def sign_in(self, email, password):
        try:
            account = AuthAccount.query.filter_by(email=email.strip().lower()).first()
        except SQLAlchemyError as e:
            raise _wrap_database_error(e, "sign in")
        if account is None or not account.verify_password(password):
            logger.warning(f"Rejected sign-in for {email}")
            raise AuthenticationError("Invalid login credentials")
        account.update_last_login()
        return {"id": account.id, "email": account.email, "access_token": None}

    def sign_out(self, identity):
        logger.info(f"Signed out {identity.get('email')}")

    def get_profile(self, user_id, access_token=None):
        try:
            profile = Profile.get_by_id(user_id)
        except SQLAlchemyError as e:
            raise _wrap_database_error(e, f"load profile {user_id}")
        return profile.to_record() if profile else None
