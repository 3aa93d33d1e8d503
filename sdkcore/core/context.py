"""
Request context for outbound API calls.

Carries the access token, idempotency request id, per-request configuration
and custom headers. The credential engine only reads `configuration`.
"""
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class APIContext:
    """
    Per-request call context.

    Attributes:
        access_token: OAuth access token, None for unauthenticated calls
        request_id: Idempotency id; generated on first use when not supplied
        mask_request_id: Suppress the request id entirely
        configuration: Per-request flat config overriding the shared store
        headers: Extra HTTP headers for the call
        application_header: Opaque application-specific header payload
    """
    access_token: Optional[str] = None
    request_id: Optional[str] = None
    mask_request_id: bool = False
    configuration: Dict[str, str] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)
    application_header: Optional[Any] = None

    def __post_init__(self):
        if self.access_token is not None and not self.access_token:
            raise ValueError("access_token cannot be empty")
        if self.request_id is not None and not self.request_id:
            raise ValueError("request_id cannot be empty")

    def get_request_id(self) -> Optional[str]:
        """Return the request id, generating one once; None when masked."""
        if self.mask_request_id:
            return None
        if not self.request_id:
            self.request_id = str(uuid.uuid4())
        return self.request_id
