class AuthHMACError(Exception):
	"""Base class for every error raised by authhmac"""

class UnknownCredential(AuthHMACError, KeyError):
	def __init__(self, access_key_id):
		super(UnknownCredential, self).__init__("No secret found for key id '{}'".format(access_key_id))
		self.access_key_id = access_key_id

	def __str__(self):
		# KeyError would repr() the message
		return self.args[0]

class UnsupportedRequestKind(AuthHMACError, TypeError):
	def __init__(self, message, request=None):
		super(UnsupportedRequestKind, self).__init__(message)
		self.request = request

class MalformedRequest(AuthHMACError, ValueError):
	def __init__(self, message, field=None):
		super(MalformedRequest, self).__init__(message)
		self.field = field
