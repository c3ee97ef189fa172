"""
HMAC authentication of HTTP requests.

Signing adds an Authorization header in the format::

	AuthHMAC <access_key_id>:<signature>

where <signature> is the Base64 encoded HMAC-SHA1 of the request's canonical
string (see authhmac.canonical), keyed with the secret of <access_key_id>.

A client signs with a single key pair::

	AuthHMAC.sign_one_shot(request, 'my-key-id', 'my-secret')

A server verifies against a credential store::

	authhmac = AuthHMAC({'my-key-id': 'my-secret'})
	if not authhmac.authenticate(request):
		...  # answer 403
"""
import base64
import datetime
import hashlib
import hmac
import logging
import re
from collections.abc import Mapping

from .canonical import MappingRequest, as_request_view, canonical_string
from .errors import MalformedRequest, UnknownCredential

logger = logging.getLogger(__name__)

SCHEME = 'AuthHMAC'
AUTHORIZATION_HEADER = 'Authorization'

# Signatures are Base64, so the remainder of the line is printable ASCII
_AUTHORIZATION_RE = re.compile(r'AuthHMAC ([^:\r\n]+):([ -~]+)')


def to_bytes(secret):
	if isinstance(secret, str):
		return secret.encode('utf-8')
	if isinstance(secret, (bytes, bytearray)):
		return bytes(secret)
	raise TypeError('secret must be bytes or str, got {}'.format(type(secret).__name__))


def lookup_secret(credential_store, access_key_id):
	"""
	Look up a secret in a credential store

	:param credential_store: mapping, object with get(), or callable taking the access key id
	:param access_key_id: The access key id
	:return: The secret, or None when the store doesn't know the id
	"""
	if callable(credential_store) and not isinstance(credential_store, Mapping):
		return credential_store(access_key_id)
	getter = getattr(credential_store, 'get', None)
	if getter is not None:
		return getter(access_key_id)
	try:
		return credential_store[access_key_id]
	except KeyError:
		return None


def parse_authorization(value):
	"""
	Split an AuthHMAC Authorization header value

	The access key id runs up to the first colon, the signature is everything after it
	and must be printable ASCII.

	:param value: Header value, may be None
	:return: (access_key_id, signature) or None if the value is not an AuthHMAC token
	"""
	if not isinstance(value, str):
		return None
	match = _AUTHORIZATION_RE.fullmatch(value)
	if match is None:
		return None
	return match.group(1), match.group(2)


def format_authorization(access_key_id, signature):
	return '%s %s:%s' % (SCHEME, access_key_id, signature)


class HMACSignature(object):

	def __init__(self, secret):
		self.secret = to_bytes(secret)

	def sha(self, message, algorithm=hashlib.sha1):
		if isinstance(message, str):
			message = message.encode('utf-8')
		digester = hmac.new(self.secret, message, algorithm)
		return self.base64_encode(digester.digest())

	def sign_request(self, request):
		return self.sha(canonical_string(request))

	def base64_encode(self, b):
		return base64.b64encode(b).decode('utf-8').strip()


class AuthHMAC(object):
	"""
	Signs and authenticates requests against a credential store.

	The store maps access key ids to secrets. A dict works; so does anything
	with a get() method, or a callable returning the secret or None.
	"""

	def __init__(self, credential_store):
		self.credential_store = credential_store

	@staticmethod
	def sign_one_shot(request, access_key_id, secret):
		"""
		Sign a request with a single access key id and secret

		:param request: The request to sign
		:param access_key_id: The access key id
		:param secret: Its secret
		:return: The Authorization header value
		"""
		return AuthHMAC({access_key_id: secret}).sign(request, access_key_id)

	def signature_for(self, request, secret):
		"""
		Compute the signature of a request

		:param request: The request
		:param secret: Secret to key the HMAC with
		:return: Base64 encoded HMAC-SHA1 of the canonical string
		"""
		return HMACSignature(secret).sign_request(request)

	def authorization_header(self, request, access_key_id, secret):
		return format_authorization(access_key_id, self.signature_for(request, secret))

	def sign(self, request, access_key_id):
		"""
		Sign a request with the secret the store holds for access_key_id

		Sets (or replaces) the Authorization header of the request.

		:param request: The request to sign
		:param access_key_id: The access key id
		:return: The Authorization header value
		:raises UnknownCredential: the store has no secret for access_key_id
		"""
		secret = lookup_secret(self.credential_store, access_key_id)
		if secret is None:
			raise UnknownCredential(access_key_id)

		view = as_request_view(request)
		value = self.authorization_header(view, access_key_id, secret)
		view.set_header(AUTHORIZATION_HEADER, value)
		return value

	def access_key_id_for(self, request):
		"""
		The access key id a request claims to be signed with. Not verified.

		:param request: The request
		:return: access key id or None
		"""
		parsed = parse_authorization(as_request_view(request).get_header(AUTHORIZATION_HEADER))
		if parsed is None:
			return None
		return parsed[0]

	def authenticate(self, request):
		"""
		Check the AuthHMAC Authorization header of a request

		Missing or malformed headers, unknown access key ids and wrong
		signatures all give False.

		:param request: The request
		:return: True if the request was signed with the secret of its access key id
		:raises UnsupportedRequestKind: the request can't be adapted
		"""
		view = as_request_view(request)
		parsed = parse_authorization(view.get_header(AUTHORIZATION_HEADER))
		if parsed is None:
			logger.debug('No AuthHMAC Authorization header on %s %s', view.method, view.path)
			return False

		access_key_id, provided = parsed
		secret = lookup_secret(self.credential_store, access_key_id)
		if secret is None:
			logger.debug('Unknown access key id %r', access_key_id)
			return False

		try:
			expected = self.signature_for(view, secret)
		except MalformedRequest as e:
			logger.debug('Cannot canonicalize request: %s', e)
			return False

		if not hmac.compare_digest(expected.encode('ascii'), provided.encode('ascii')):
			logger.debug('Signature mismatch for access key id %r', access_key_id)
			return False
		return True


def content_md5(payload=b''):
	"""Base64 MD5 of a request body, for the Content-MD5 header"""
	if isinstance(payload, str):
		payload = payload.encode('utf-8')
	hash = hashlib.md5()
	hash.update(payload)
	return base64.b64encode(hash.digest()).decode('utf-8')


def http_date(timestamp=None):
	if timestamp is None:
		timestamp = datetime.datetime.now(datetime.timezone.utc)
	return timestamp.strftime('%a, %d %b %Y %H:%M:%S GMT')


def get_hmac_auth_headers(access_key_id, secret_key, content_type, body, url_path, method='GET'):
	"""
	Headers for a request that is about to be sent

	:param access_key_id: The access key id
	:param secret_key: Its secret
	:param content_type: Content-Type of the request
	:param body: Request body (str, bytes or None)
	:param url_path: Path of the request, query string allowed
	:param method: HTTP method
	:return: dict with Content-Type, Date, Content-MD5 and Authorization
	"""
	headers = {
		'Content-Type': content_type,
		'Date': http_date(),
		'Content-MD5': content_md5(b'' if body is None else body),
	}
	request = MappingRequest(method.upper(), url_path, headers)
	AuthHMAC.sign_one_shot(request, access_key_id, secret_key)
	headers['Authorization'] = request.get_header(AUTHORIZATION_HEADER)
	return headers
