"""Wrapper de httpx para la API de control.

Por qué un wrapper:
- Estandariza timeouts, headers y el transporte sobre socket Unix.
- Facilita testeo: se puede sustituir el transporte por un `httpx.MockTransport`.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings

# El host es irrelevante sobre un socket Unix, pero HTTP/1.1 exige cabecera Host.
API_BASE_URL = "http://localhost"

JSON_HEADERS: dict[str, str] = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


def build_client(
    settings: AppSettings | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Crea un `httpx.Client` conectado al socket de control.

    Por qué un builder:
    - Centraliza timeouts/headers para que todas las llamadas se comporten igual.
    - `transport` permite inyectar un doble en tests sin tocar el socket real.
    """

    settings = settings or AppSettings()
    if transport is None:
        transport = httpx.HTTPTransport(uds=str(settings.api_socket))

    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": JSON_HEADERS["Accept"],
    }
    return httpx.Client(
        base_url=API_BASE_URL,
        transport=transport,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        headers=headers,
    )
