"""
Credential Gate.

Shared-secret check guarding every mutating catalog operation.
"""

import base64
import binascii
import hmac
import logging
from typing import Optional

from cineshelf.utils.errors import UnauthorizedError

logger = logging.getLogger(__name__)


class CredentialGate:
    """
    Validates bearer credentials against the admin password.

    A credential is the base64 encoding of the password. It is a boolean
    capability, not a session: it neither expires nor carries scopes.
    """

    def __init__(self, admin_password: str):
        """
        Initialize credential gate.

        Args:
            admin_password: Shared secret that credentials must decode to
        """
        if not admin_password:
            raise ValueError("admin_password must not be empty")
        self._admin_password = admin_password.encode("utf-8")

    def authorize(self, credential: Optional[str]) -> bool:
        """
        Check a bearer credential.

        Args:
            credential: Token as sent by the caller, with or without a "Bearer " prefix

        Returns:
            True if the credential decodes to the admin password
        """
        if not credential:
            return False

        token = credential.strip()
        if token.lower().startswith("bearer "):
            token = token[len("bearer "):].strip()

        # Clients may strip the trailing "=" padding
        token += "=" * (-len(token) % 4)
        try:
            decoded = base64.b64decode(token, validate=True)
        except (binascii.Error, ValueError):
            return False

        return hmac.compare_digest(decoded, self._admin_password)

    def require(self, credential: Optional[str], action: str = "modify the catalog") -> None:
        """
        Raise unless the credential is valid.

        Raises:
            UnauthorizedError: If authorize() returns False
        """
        if not self.authorize(credential):
            logger.warning(f"Rejected unauthorized attempt to {action}")
            raise UnauthorizedError(f"Unauthorized: valid credential required to {action}")
