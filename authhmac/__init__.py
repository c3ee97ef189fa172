from .canonical import (CanonicalStringBuilder, RequestView, MappingRequest, RequestsRequest,
                        WSGIRequest, as_request_view, canonical_string)
from .client import HMACAuth
from .errors import AuthHMACError, UnknownCredential, UnsupportedRequestKind, MalformedRequest
from .hmac import AuthHMAC, content_md5, get_hmac_auth_headers, http_date, parse_authorization
from .middleware import HMACAuthMiddleware

__version__ = '0.2.0'
