"""Session token lifecycle: credentials, tokens, revocation and request checks."""

from shopdesk.services.auth.authenticator import Authentication, RequestAuthenticator
from shopdesk.services.auth.credentials import CredentialVerifier
from shopdesk.services.auth.service import SessionManager

__all__ = ["Authentication", "CredentialVerifier", "RequestAuthenticator", "SessionManager"]
