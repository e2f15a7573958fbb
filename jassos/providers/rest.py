#!/usr/bin/env python3
"""
JSON-over-HTTP helpers for backends reached without an SDK.
"""

from __future__ import annotations

# Standard Library
import json
import urllib.error
import urllib.request
from http.client import HTTPResponse

# local repo modules
from ..errors import BackendError

DEFAULT_TIMEOUT = 120
TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (urllib.error.URLError, OSError, ValueError)

#============================================


def open_json(
	provider: str,
	url: str,
	payload: dict,
	headers: dict[str, str] | None = None,
	timeout: float = DEFAULT_TIMEOUT,
) -> HTTPResponse:
	"""
	POST a JSON payload and return the open response.

	Args:
		provider: Provider id used in error messages.
		url: Endpoint URL.
		payload: JSON-serializable request body.
		headers: Extra request headers.
		timeout: Socket timeout in seconds.

	Returns:
		Open HTTP response; the caller owns closing it.
	"""
	request_headers = {"Content-Type": "application/json"}
	if headers:
		request_headers.update(headers)
	request = urllib.request.Request(
		url,
		data=json.dumps(payload).encode("utf-8"),
		headers=request_headers,
		method="POST",
	)
	try:
		response = urllib.request.urlopen(request, timeout=timeout)
	except urllib.error.HTTPError as exc:
		raise BackendError(provider, _http_error_detail(exc)) from exc
	except (urllib.error.URLError, OSError) as exc:
		raise BackendError(provider, str(exc)) from exc
	if response.status >= 400:
		response.close()
		raise BackendError(provider, f"status {response.status}")
	return response


#============================================


def post_json(
	provider: str,
	url: str,
	payload: dict,
	headers: dict[str, str] | None = None,
	timeout: float = DEFAULT_TIMEOUT,
) -> dict:
	"""
	POST a JSON payload and decode the JSON response body.
	"""
	with open_json(provider, url, payload, headers=headers, timeout=timeout) as response:
		try:
			body = response.read()
		except OSError as exc:
			raise BackendError(provider, str(exc)) from exc
	try:
		parsed = json.loads(body.decode("utf-8"))
	except ValueError as exc:
		raise BackendError(provider, f"invalid JSON response: {exc}") from exc
	if not isinstance(parsed, dict):
		raise BackendError(provider, "response must decode to a JSON object")
	return parsed


#============================================


def _http_error_detail(exc: urllib.error.HTTPError) -> str:
	try:
		body = exc.read().decode("utf-8", errors="replace")
	except Exception:
		body = ""
	try:
		parsed = json.loads(body) if body else None
	except ValueError:
		parsed = None
	if isinstance(parsed, dict):
		error = parsed.get("error")
		if isinstance(error, dict) and error.get("message"):
			return f"status {exc.code}: {error['message']}"
		if isinstance(error, str) and error:
			return f"status {exc.code}: {error}"
	if body:
		return f"status {exc.code}: {body.strip()[:500]}"
	return f"status {exc.code}: {exc.reason}"
