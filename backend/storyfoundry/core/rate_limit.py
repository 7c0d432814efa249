"""Request rate limiting."""
from slowapi import Limiter
from slowapi.util import get_remote_address

from storyfoundry.core.config import settings

limiter = Limiter(key_func=get_remote_address)

PROJECT_CREATE_LIMIT = f"{settings.RATE_LIMIT_PER_MINUTE}/minute"
