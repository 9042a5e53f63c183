"""Model alias resolution and pro-to-flash fallback."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from imgraft.errors import ErrorCode, code_of

ALIAS_FLASH = "flash"
ALIAS_PRO = "pro"

BUILTIN_FLASH_MODEL = "gemini-3.1-flash-image-preview"
BUILTIN_PRO_MODEL = "gemini-3-pro-image-preview"

_FALLBACKS = {BUILTIN_PRO_MODEL: BUILTIN_FLASH_MODEL}

_FALLBACK_ERROR_CODES = frozenset(
    {
        ErrorCode.RATE_LIMIT_EXCEEDED,
        ErrorCode.AUTH_INVALID,  # stands for PERMISSION_DENIED
        ErrorCode.BACKEND_UNAVAILABLE,
    }
)


def fallback_model(current: str) -> str | None:
    """Return the model to fall back to from ``current``, or None if there is none."""
    return _FALLBACKS.get(current)


def is_fallback_error(err: BaseException | None) -> bool:
    """Tell whether ``err`` should trigger a model fallback."""
    return code_of(err) in _FALLBACK_ERROR_CODES


def fallback_warning(from_model: str, to_model: str) -> str:
    """Return the warning recorded when a fallback happens."""
    return f"model fallback: {from_model} → {to_model} (retrying with fallback model)"


def resolve_aliases_from_models(models: Iterable[str]) -> dict[str, str]:
    """Map the flash/pro aliases to full model names found in ``models``.

    Only the last path segment is examined, case-insensitively; the last
    matching model in the list wins.
    """
    result: dict[str, str] = {}
    for name in models:
        segment = name.rsplit("/", 1)[-1].lower()
        if ALIAS_FLASH in segment:
            result[ALIAS_FLASH] = name
        if ALIAS_PRO in segment:
            result[ALIAS_PRO] = name
    return result


def resolve(
    alias: str,
    default_model: str = "",
    models: Mapping[str, str] | None = None,
) -> str:
    """Resolve an alias or full model name to the model to use."""
    models = models or {}
    effective = alias or default_model or ALIAS_FLASH
    if effective == ALIAS_FLASH:
        return models.get(ALIAS_FLASH) or BUILTIN_FLASH_MODEL
    if effective == ALIAS_PRO:
        return models.get(ALIAS_PRO) or BUILTIN_PRO_MODEL
    return effective