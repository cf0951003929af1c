"""
Error taxonomy for the dashboard service.

Every error carries the screen or alert the client should show:

- setup: backend credentials are missing (handled before any route runs)
- connection-error: the backend could not be reached while a session loads
- alert: a single save/delete/upload failed; nothing was changed locally
"""


class ClinicError(Exception):
    status_code = 500
    screen = None

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        payload = {"error": self.message}
        if self.screen:
            payload["screen"] = self.screen
        if self.details:
            payload["details"] = self.details
        return payload


class BackendError(ClinicError):
    """A backend call failed for a reason other than connectivity."""
    status_code = 502


class BackendUnavailable(BackendError):
    status_code = 503


class SessionLoadError(ClinicError):
    status_code = 503
    screen = "connection-error"

    def to_dict(self):
        payload = super().to_dict()
        payload["action"] = "reload"
        return payload


class RecordActionError(ClinicError):
    """A save, delete or upload failed; the in-memory collection is untouched."""
    status_code = 502

    def to_dict(self):
        payload = super().to_dict()
        payload["alert"] = True
        return payload


class AuthenticationError(ClinicError):
    status_code = 401
    screen = "login"


class RecordNotFound(ClinicError):
    status_code = 404


class ActionConflict(ClinicError):
    status_code = 409
