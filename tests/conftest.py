"""Pytest configuration and fixtures."""

import pytest

from authhmac import AuthHMAC, MappingRequest

DATE = "Thu, 10 Jul 2008 03:29:56 GMT"


@pytest.fixture
def credentials():
	"""Credential store with two key pairs."""
	return {"access key 1": "secret1", "access key 2": "secret2"}


@pytest.fixture
def authhmac(credentials):
	return AuthHMAC(credentials)


@pytest.fixture
def request_factory():
	"""Build a fresh PUT request with all signed headers set."""
	def factory(**overrides):
		headers = {
			"content-type": "text/plain",
			"content-md5": "blahblah",
			"date": DATE,
		}
		headers.update(overrides.pop("headers", {}))
		return MappingRequest(
			overrides.pop("method", "PUT"),
			overrides.pop("path", "/path/to/put?foo=bar&bar=foo"),
			headers,
		)
	return factory
