import logging
import posixpath

from .hmac import AuthHMAC
from .settings import DEFAULT_FAILURE_MESSAGE

logger = logging.getLogger(__name__)

ACCESS_KEY_ID_ENVIRON_KEY = 'authhmac.access_key_id'


class HMACAuthMiddleware(object):
	"""
	WSGI middleware that only lets AuthHMAC signed requests through.

	Unauthenticated requests get a 403 with failure_message as the body.
	Authenticated ones reach the wrapped app with the access key id stored in
	environ['authhmac.access_key_id'].

		app = HMACAuthMiddleware(app, {'my-key-id': 'my-secret'})
	"""

	def __init__(self, app, credentials, failure_message=DEFAULT_FAILURE_MESSAGE, exempt_paths=()):
		"""
		:param app: The WSGI application to protect
		:param credentials: An AuthHMAC, or a credential store to build one from
		:param failure_message: Text sent with the 403 response
		:param exempt_paths: Path prefixes that skip authentication
		"""
		self.app = app
		if isinstance(credentials, AuthHMAC):
			self.authhmac = credentials
		else:
			self.authhmac = AuthHMAC(credentials)
		self.failure_message = failure_message
		self.exempt_paths = tuple(exempt_paths)

	@classmethod
	def from_settings(cls, app, settings):
		return cls(app, settings.credential_store(), failure_message=settings.failure_message, exempt_paths=settings.exempt_paths)

	def is_exempt(self, path):
		# "/health/../admin" must not count as "/health"
		path = posixpath.normpath(path or '/')
		for prefix in self.exempt_paths:
			if path == prefix or path.startswith(prefix.rstrip('/') + '/'):
				return True
		return False

	def __call__(self, environ, start_response):
		path = environ.get('SCRIPT_NAME', '') + environ.get('PATH_INFO', '')
		if self.is_exempt(path):
			return self.app(environ, start_response)

		if not self.authhmac.authenticate(environ):
			logger.info('Dropping %s %s with bad HMAC', environ.get('REQUEST_METHOD'), path)
			body = self.failure_message.encode('utf-8')
			start_response('403 Forbidden', [
				('Content-Type', 'text/plain; charset=utf-8'),
				('Content-Length', str(len(body))),
			])
			return [body]

		environ[ACCESS_KEY_ID_ENVIRON_KEY] = self.authhmac.access_key_id_for(environ)
		return self.app(environ, start_response)
