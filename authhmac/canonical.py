"""
Canonical string construction for AuthHMAC.

The canonical string of a request is::

	HTTP-Verb    + "\\n" +
	Content-Type + "\\n" +
	Content-MD5  + "\\n" +
	Date         + "\\n" +
	request-path

where request-path has its query string removed. Missing headers count as
empty strings. Nothing else about the request, body included, is signed.
"""
from collections.abc import Mapping
from urllib.parse import quote

import requests
from requests.structures import CaseInsensitiveDict

from .errors import UnsupportedRequestKind, MalformedRequest

CANONICAL_HEADERS = ('content-type', 'content-md5', 'date')

# Reserved characters requests leaves unquoted in PreparedRequest.path_url,
# minus "%", "?" and "#": in a decoded PATH_INFO those are literal path data
_PATH_SAFE = "!$&'()*+,/:;=@[]~"


class RequestView(object):
	"""
	The read/write surface AuthHMAC needs from an HTTP request.

	Subclasses adapt one concrete request type. ``get_header`` returns None for
	a missing header.
	"""

	@property
	def method(self):
		raise NotImplementedError

	@property
	def path(self):
		raise NotImplementedError

	def get_header(self, name):
		raise NotImplementedError

	def set_header(self, name, value):
		raise NotImplementedError


class MappingRequest(RequestView):
	"""
	A hand-built request: method, path (query string allowed) and headers.
	Header names are case-insensitive, like they are on the wire.
	"""
	def __init__(self, method, path, headers=None):
		self._method = method
		self._path = path
		self.headers = CaseInsensitiveDict(headers or {})

	@property
	def method(self):
		return self._method

	@method.setter
	def method(self, value):
		self._method = value

	@property
	def path(self):
		return self._path

	@path.setter
	def path(self, value):
		self._path = value

	def get_header(self, name):
		return self.headers.get(name)

	def set_header(self, name, value):
		self.headers[name] = value

	def __repr__(self):
		return '<MappingRequest [{} {}]>'.format(self._method, self._path)


class RequestsRequest(RequestView):
	"""Adapts a requests.PreparedRequest"""
	def __init__(self, prepared):
		self.prepared = self.request = prepared

	@property
	def method(self):
		return self.prepared.method

	@property
	def path(self):
		return self.prepared.path_url

	def get_header(self, name):
		value = self.prepared.headers.get(name)
		if isinstance(value, bytes):
			value = value.decode('latin-1')
		return value

	def set_header(self, name, value):
		self.prepared.headers[name] = value


class WSGIRequest(RequestView):
	"""
	Adapts a WSGI (or CGI-style) environ dict.

	The path is taken from RAW_URI or REQUEST_URI when the server provides
	them, otherwise it is rebuilt from SCRIPT_NAME and PATH_INFO and quoted
	the way requests quotes outgoing paths, with "%", "?" and "#" escaped.
	"""
	def __init__(self, environ):
		self.environ = self.request = environ

	@staticmethod
	def environ_key(name):
		key = name.upper().replace('-', '_')
		if key in ('CONTENT_TYPE', 'CONTENT_LENGTH'):
			return key
		return 'HTTP_' + key

	@property
	def method(self):
		return self.environ.get('REQUEST_METHOD')

	@property
	def path(self):
		for key in ('RAW_URI', 'REQUEST_URI'):
			if self.environ.get(key):
				return self.environ[key]
		# PEP 3333 native strings carry the raw bytes as latin-1
		raw = (self.environ.get('SCRIPT_NAME', '') + self.environ.get('PATH_INFO', '')).encode('latin-1')
		return quote(raw, safe=_PATH_SAFE) or '/'

	def get_header(self, name):
		return self.environ.get(self.environ_key(name))

	def set_header(self, name, value):
		self.environ[self.environ_key(name)] = value


class DuckRequest(RequestView):
	"""
	Adapts any other request object.

	The method comes from a string ``method`` attribute, falling back to
	REQUEST_METHOD in an ``environ`` or ``env`` mapping. Headers are read from
	the request itself when it supports item access, otherwise from its
	``headers`` attribute.
	"""
	def __init__(self, request):
		if hasattr(request, '__getitem__') and hasattr(request, '__setitem__'):
			self.headers = request
		elif getattr(request, 'headers', None) is not None:
			self.headers = request.headers
		else:
			raise UnsupportedRequestKind("Don't know how to get the headers from {!r}".format(request), request)
		if not isinstance(getattr(request, 'path', None), str):
			raise UnsupportedRequestKind("Don't know how to get the path from {!r}".format(request), request)
		self.request = request

	@property
	def method(self):
		method = getattr(self.request, 'method', None)
		if isinstance(method, str):
			return method
		for attr in ('environ', 'env'):
			env = getattr(self.request, attr, None)
			if isinstance(env, Mapping) and isinstance(env.get('REQUEST_METHOD'), str):
				return env['REQUEST_METHOD']
		raise UnsupportedRequestKind("Don't know how to get the request method from {!r}".format(self.request), self.request)

	@property
	def path(self):
		return self.request.path

	def get_header(self, name):
		getter = getattr(self.headers, 'get', None)
		if getter is not None:
			return getter(name)
		try:
			return self.headers[name]
		except KeyError:
			return None

	def set_header(self, name, value):
		self.headers[name] = value


def as_request_view(request):
	"""
	Pick the RequestView adapter for a request.

	:param request: a RequestView, requests.PreparedRequest, WSGI environ or
		any object exposing method/path/headers
	:return: RequestView
	:raises UnsupportedRequestKind: when the request can't be adapted
	"""
	if isinstance(request, RequestView):
		return request
	if isinstance(request, requests.PreparedRequest):
		return RequestsRequest(request)
	if isinstance(request, Mapping):
		if 'REQUEST_METHOD' in request:
			return WSGIRequest(request)
		raise UnsupportedRequestKind('Mapping without REQUEST_METHOD is not a WSGI environ', request)
	return DuckRequest(request)


def _check_field(view, name, value):
	if not isinstance(value, str):
		raise UnsupportedRequestKind('{} must be a string, got {!r}'.format(name, value), getattr(view, 'request', view))
	if '\n' in value or '\r' in value:
		raise MalformedRequest('{} contains a line break'.format(name), name)
	try:
		value.encode('utf-8')
	except UnicodeEncodeError:
		raise MalformedRequest('{} is not valid UTF-8'.format(name), name)
	return value


def canonical_string(request):
	"""
	Build the canonical string for a request

	:param request: anything as_request_view accepts
	:return: str
	:raises UnsupportedRequestKind: request lacks method, path or headers
	:raises MalformedRequest: a signed field contains a line break or a lone surrogate
	"""
	view = as_request_view(request)

	fields = [_check_field(view, 'method', view.method)]
	for name in CANONICAL_HEADERS:
		value = view.get_header(name)
		fields.append(_check_field(view, name, '' if value is None else value))
	path = view.path
	if isinstance(path, str):
		path = path.split('?', 1)[0]
	fields.append(_check_field(view, 'path', path))

	return '\n'.join(fields)


class CanonicalStringBuilder(object):
	"""CanonicalStringBuilder.build(request) is canonical_string(request)"""
	build = staticmethod(canonical_string)
