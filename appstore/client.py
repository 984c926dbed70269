"""This module defines the client interface called by users of the App store
service.  These client calls perform HTTP requests to the server which in turn
calls the AppStore to perform the operation.
"""
import os
import requests

from appstore.types import App, AppUpdateRequest
from appstore.codec import decode_app


SERVICE_URL = os.environ.get("APPSTORE_CLIENT_URL", "http://127.0.0.1:8080")

JSON_HEADERS = {"Accept": "application/json"}

# -------------------------------------------------------------------------------------


class ClientError(Exception):
    """The service answered with a non-success status."""

    def __init__(self, status_code, message):
        super().__init__(f"App store request failed {status_code}: {message}")
        self.status_code = status_code
        self.message = message


def _check(response, expected=(200,)):
    if response.status_code not in expected:
        raise ClientError(response.status_code, response.text)
    return response


def _app(response, expected=(200,)) -> App:
    _check(response, expected)
    return decode_app(response.content, "application/json")


def _payload(label, description):
    # None means "not sent" so PATCH leaves that field alone.
    return AppUpdateRequest.of(label, description).to_dict()


# -------------------------------------------------------------------------------------


def check_alive(service_url=SERVICE_URL, timeout=30):
    response = requests.get(service_url + "/check-alive", timeout=timeout)
    return _check(response).json()


def get_app(app_id: str, service_url=SERVICE_URL, timeout=30) -> App:
    response = requests.get(
        f"{service_url}/apps/{app_id}", headers=JSON_HEADERS, timeout=timeout
    )
    return _app(response)


def create_app(
    label: str, description: str, service_url=SERVICE_URL, timeout=30
) -> App:
    response = requests.post(
        f"{service_url}/apps",
        json=_payload(label, description),
        headers=JSON_HEADERS,
        timeout=timeout,
    )
    return _app(response, expected=(201,))


def update_app(
    app_id: str, label: str, description: str, service_url=SERVICE_URL, timeout=30
) -> App:
    """Replace both fields of an App (PUT)."""
    response = requests.put(
        f"{service_url}/apps/{app_id}",
        json=_payload(label, description),
        headers=JSON_HEADERS,
        timeout=timeout,
    )
    return _app(response)


def patch_app(
    app_id: str,
    label: str | None = None,
    description: str | None = None,
    service_url=SERVICE_URL,
    timeout=30,
) -> App:
    """Change only the fields which are not None (PATCH)."""
    response = requests.patch(
        f"{service_url}/apps/{app_id}",
        json=_payload(label, description),
        headers=JSON_HEADERS,
        timeout=timeout,
    )
    return _app(response)


def delete_app(app_id: str, service_url=SERVICE_URL, timeout=30) -> None:
    response = requests.delete(f"{service_url}/apps/{app_id}", timeout=timeout)
    _check(response)
