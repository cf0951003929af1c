# services/session_service.py
from urllib.parse import quote

from flask import current_app

from clinic import logger
from ..errors import BackendError, SessionLoadError
from ..gateways import create_backend
from ..state import ClinicState, SessionUser


def build_session_profile(identity, profile=None):
    """Profile row of the signed-in user, completed from the auth identity when missing"""
    email = identity.get('email') or ''
    profile = profile or {}
    return {
        'id': identity.get('id'),
        'name': profile.get('name') or email.split('@')[0] or 'Usuário',
        'email': email,
        'role': profile.get('role') or 'ATTENDANT',
        'active': True,
        'avatar': profile.get('avatar') or f"https://ui-avatars.com/api/?name={quote(email)}",
        'specialty': profile.get('specialty'),
    }


class SessionService:

    @staticmethod
    def start_session(email, password, app=None):
        """
        Sign in, load the session collections and register the session.

        Raises:
            AuthenticationError: credentials rejected
            SessionLoadError: the backend could not be reached while loading
        """
        app = app or current_app._get_current_object()
        backend = create_backend(app)
        try:
            identity = backend.auth.sign_in(email, password)
        except BackendError as e:
            if e.status_code == 503:
                raise SessionLoadError(e.message) from e
            raise

        if identity.get('access_token'):
            backend = create_backend(app, access_token=identity['access_token'])

        try:
            profile = backend.auth.get_profile(identity['id'], identity.get('access_token'))
        except BackendError as e:
            logger.warning(f"Profile lookup failed, using auth data: {e.message}")
            profile = None

        state = ClinicState(backend)
        try:
            state.load_session(app, workers=app.config.get('SESSION_LOAD_WORKERS', 4))
        except BackendError as e:
            logger.error(f"Session load failed for {email}: {e.message}")
            raise SessionLoadError(e.message) from e

        session_user = SessionUser(build_session_profile(identity, profile), identity, state)
        app.extensions['clinic_sessions'].register(session_user)
        logger.info(f"Session started for {identity.get('email')}")
        return session_user

    @staticmethod
    def end_session(session_user, app=None):
        app = app or current_app._get_current_object()
        try:
            session_user.state.backend.auth.sign_out(session_user.identity)
        except BackendError as e:
            logger.warning(f"Backend sign-out failed: {e.message}")
        app.extensions['clinic_sessions'].discard(session_user.session_id)
        logger.info(f"Session ended for {session_user.profile.get('email')}")
