"""
Модуль: `utils/i18n.py`.
Назначение: Язык сообщений API и подключение Flask-Babel.

Порядок выбора: параметр `?lang=`, cookie языка, заголовок Accept-Language,
язык по умолчанию. Выбранный код хранится в `g.lang` до конца запроса.
"""

from __future__ import annotations

from flask import g, request

from extensions import babel


def _pick(candidate: str | None, supported_languages: tuple[str, ...]) -> str | None:
    if not candidate:
        return None
    code = candidate.strip().lower().replace("_", "-").split("-", 1)[0]
    return code if code in supported_languages else None


def negotiate_language(
    supported_languages: tuple[str, ...],
    default_language: str,
    query_lang: str | None = None,
    cookie_lang: str | None = None,
    accept_languages=None,
) -> str:
    """Возвращает первый поддерживаемый язык из источников по приоритету."""
    for candidate in (query_lang, cookie_lang):
        picked = _pick(candidate, supported_languages)
        if picked:
            return picked

    if accept_languages is not None:
        preferred = accept_languages.best_match(supported_languages)
        if preferred:
            return preferred

    return _pick(default_language, supported_languages) or supported_languages[0]


def init_i18n(app) -> None:
    """Регистрирует выбор языка для каждого запроса и селектор локали Babel."""

    def select_locale() -> str:
        return getattr(g, "lang", app.config["DEFAULT_LANGUAGE"])

    babel.init_app(app, locale_selector=select_locale)

    @app.before_request
    def resolve_request_language():
        g.lang = negotiate_language(
            supported_languages=tuple(app.config["SUPPORTED_LANGUAGES"]),
            default_language=app.config["DEFAULT_LANGUAGE"],
            query_lang=request.args.get("lang"),
            cookie_lang=request.cookies.get(app.config["LANG_COOKIE_NAME"]),
            accept_languages=request.accept_languages,
        )
