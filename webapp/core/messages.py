from __future__ import annotations

from enum import IntEnum

from webapp.core.config import settings


class ResponseStatusCode(IntEnum):
    OK = 200
    CREATED = 201
    ACCEPTED = 202
    NO_CONTENT = 204

    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404

    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501
    BAD_GATEWAY = 502

    @property
    def is_success(self) -> bool:
        return is_success_code(int(self))


RESPONSE_MESSAGES: dict[str, dict[int, str]] = {
    "es-MX": {
        200: "Operación realizada correctamente",
        201: "Registro creado correctamente",
        202: "Solicitud aceptada",
        204: "Sin contenido",
        400: "Solicitud incorrecta",
        401: "No autorizado",
        403: "Acceso prohibido",
        404: "Recurso no encontrado",
        500: "Error interno del servidor",
        501: "Funcionalidad no implementada",
        502: "Puerta de enlace incorrecta",
    },
    "en-US": {
        200: "Operation completed successfully",
        201: "Record created successfully",
        202: "Request accepted",
        204: "No content",
        400: "Bad request",
        401: "Unauthorized",
        403: "Forbidden",
        404: "Resource not found",
        500: "Internal server error",
        501: "Not implemented",
        502: "Bad gateway",
    },
}


def is_success_code(code: int) -> bool:
    return 200 <= int(code) <= 299


def _normalize_language(language: str | None) -> str:
    supported = settings.supported_languages_list
    text = str(language or "").strip()
    if not text:
        return settings.DEFAULT_LANGUAGE
    for candidate in supported:
        if candidate.lower() == text.lower():
            return candidate
    # "en" or "en-GB" -> first supported language with the same primary tag
    primary = text.split("-", 1)[0].lower()
    for candidate in supported:
        if candidate.split("-", 1)[0].lower() == primary:
            return candidate
    return settings.DEFAULT_LANGUAGE


def language_from_header(accept_language: str | None) -> str:
    for part in str(accept_language or "").split(","):
        tag = part.split(";", 1)[0].strip()
        if not tag or tag == "*":
            continue
        normalized = _normalize_language(tag)
        if normalized.split("-", 1)[0].lower() == tag.split("-", 1)[0].lower():
            return normalized
    return settings.DEFAULT_LANGUAGE


def get_message(code: int, language: str | None = None) -> str:
    table = RESPONSE_MESSAGES.get(_normalize_language(language)) or RESPONSE_MESSAGES.get(settings.DEFAULT_LANGUAGE, {})
    return table.get(int(code), str(int(code)))
