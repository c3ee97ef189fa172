from requests.auth import AuthBase

from .hmac import AuthHMAC, content_md5, http_date


class HMACAuth(AuthBase):
	"""
	Signs outgoing requests with AuthHMAC

	Basic Usage:
		auth = HMACAuth("<my-access-key-id>", "<my-secret-key>")
		result = requests.get("https://example.com/api/endpoint", auth=auth)

	A Date header is added when the request has none, and a Content-MD5 header
	when the request carries a str or bytes body and has none.
	"""
	def __init__(self, access_key_id, secret_key, content_md5=True, date=True):
		self.access_key_id = access_key_id
		self.secret_key = secret_key
		self.content_md5 = content_md5
		self.date = date

	@classmethod
	def from_settings(cls, settings):
		"""
		Build the auth hook from authhmac.settings.Settings

		:param settings: Settings with access_key_id and secret_key set
		"""
		if not settings.access_key_id or settings.secret_key is None:
			raise ValueError('access_key_id and secret_key must be configured')
		return cls(settings.access_key_id, settings.secret_key.get_secret_value())

	def __call__(self, r):
		if self.date and 'Date' not in r.headers:
			r.headers['Date'] = http_date()
		if self.content_md5 and isinstance(r.body, (str, bytes)) and r.body and 'Content-MD5' not in r.headers:
			r.headers['Content-MD5'] = content_md5(r.body)

		AuthHMAC.sign_one_shot(r, self.access_key_id, self.secret_key)
		return r
