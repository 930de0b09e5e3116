from .service import AuthService
from .dependencies import get_session, get_current_user, require_roles, require_form, get_admin_session

__all__ = [
    "AuthService",
    "get_session",
    "get_current_user",
    "require_roles",
    "require_form",
    "get_admin_session"
]
