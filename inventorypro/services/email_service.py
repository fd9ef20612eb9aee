import json
from urllib import error, request
from urllib.parse import urlparse

from inventorypro.config import get_settings

_ALLOWED_HTTP_SCHEMES = {"http", "https"}


def _validate_api_url(api_url):
    parsed = urlparse(api_url)
    scheme = parsed.scheme.lower()
    if scheme not in _ALLOWED_HTTP_SCHEMES or not parsed.netloc:
        raise RuntimeError("EMAIL_API_URL must be an absolute HTTP(S) URL")
    return api_url


def validate_api_url(api_url):
    return _validate_api_url(api_url)


def _normalize_recipients(recipients):
    if recipients is None:
        return []
    if isinstance(recipients, str):
        recipients = [recipients]
    return [str(value).strip() for value in recipients if value and str(value).strip()]


def build_payload(sender, recipients, subject, html, text=None):
    payload = {
        "from": sender,
        "to": _normalize_recipients(recipients),
        "subject": subject,
        "html": html,
    }
    if text:
        payload["text"] = text
    return payload


def _raise_http_error(exc):
    body = ""
    try:
        body_bytes = exc.read()
        if body_bytes:
            body = body_bytes.decode("utf-8", errors="replace").strip()
    except (OSError, ValueError):
        body = ""

    if body:
        raise RuntimeError(
            "Email API error: HTTP {} {}".format(exc.code, body)
        ) from exc
    raise RuntimeError("Email API error: HTTP {}".format(exc.code)) from exc


def send_email(subject, html, recipients, text=None):
    """Send one message through the configured provider; returns its message id."""
    settings = get_settings()

    api_url = (settings.EMAIL_API_URL or "").strip()
    api_key = (settings.EMAIL_API_KEY or "").strip()

    if not api_url:
        raise RuntimeError("EMAIL_API_URL is not configured")
    if not api_key:
        raise RuntimeError("EMAIL_API_KEY is not configured")
    api_url = _validate_api_url(api_url)

    recipients = _normalize_recipients(recipients)
    if not recipients:
        raise ValueError("recipient is required")
    if not subject or not str(subject).strip():
        raise ValueError("subject is required")

    payload = json.dumps(
        build_payload(settings.EMAIL_FROM, recipients, str(subject).strip(), html, text)
    ).encode("utf-8")

    if api_key.lower().startswith("bearer "):
        auth_header = api_key
    else:
        auth_header = "Bearer {}".format(api_key)

    req = request.Request(
        api_url,
        data=payload,
        method="POST",
        headers={
            "Content-Type": "application/json",
            "Authorization": auth_header,
        },
    )

    try:
        with request.urlopen(req, timeout=15) as response:  # nosec B310
            status_code = response.getcode()
            if status_code < 200 or status_code >= 300:
                raise RuntimeError("Email API error: HTTP {}".format(status_code))
            body = response.read()
    except error.HTTPError as exc:
        _raise_http_error(exc)
    except error.URLError as exc:
        raise RuntimeError("Email API error: {}".format(exc.reason)) from exc

    try:
        data = json.loads(body.decode("utf-8")) if body else {}
    except ValueError:
        data = {}
    if isinstance(data, dict):
        return data.get("id")
    return None
