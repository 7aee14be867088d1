# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Localized log message catalog.

Reporter log lines are looked up by key and formatted with keyword
arguments. The locale comes from ``ModelReporterConfig.locale``; unknown
locales and keys missing from a catalog fall back to English.

Example:
    >>> get_message("stats_sent", "pt", attempt=2)
    'Estatísticas enviadas com sucesso (tentativa 2)'
"""

from __future__ import annotations

from botgate_reporter.enums import EnumLocale

_MESSAGES: dict[EnumLocale, dict[str, str]] = {
    EnumLocale.EN: {
        "initialized": "BotGate Reporter initialized",
        "already_running": "Reporter already running",
        "started": "Reporter started",
        "stopped": "Reporter stopped",
        "client_ready": "Bot ready: {tag}",
        "leader": "This process is the reporting leader",
        "follower": "This process is not the reporting leader, reporting suppressed",
        "stats_updated": "Stats updated successfully",
        "stats_update_failed": "Failed to update stats",
        "stats_sent": "Stats sent successfully (attempt {attempt})",
        "send_retry": "Request failed (attempt {attempt}/{max_attempts}), retrying in {delay}s",
        "send_exhausted": "Request failed after {max_attempts} attempts",
        "policy_rejected": "Request rejected with HTTP {status}, re-verifying policy",
        "api_key_verified": "API key verified",
        "api_key_invalid": "API key verification failed",
        "tier_changed": "Tier changed: {old} -> {new}",
        "interval_changed": "Update interval changed to {minutes} minutes",
        "auto_update_enabled": "Auto-update enabled (every {minutes} minutes)",
        "heartbeat_enabled": "Heartbeat enabled (every {minutes} minutes)",
        "heartbeat_disabled": "Heartbeat disabled",
        "webhook_registered": "Webhook registered at {url}",
        "webhook_registration_failed": "Webhook auto-registration failed",
        "vote_received": "Vote received",
    },
    EnumLocale.PT: {
        "initialized": "BotGate Reporter inicializado",
        "already_running": "Reporter já está em execução",
        "started": "Reporter iniciado",
        "stopped": "Reporter parado",
        "client_ready": "Bot pronto: {tag}",
        "leader": "Este processo é o líder de envio",
        "follower": "Este processo não é o líder de envio, envio suprimido",
        "stats_updated": "Estatísticas atualizadas com sucesso",
        "stats_update_failed": "Falha ao atualizar estatísticas",
        "stats_sent": "Estatísticas enviadas com sucesso (tentativa {attempt})",
        "send_retry": "Falha na requisição (tentativa {attempt}/{max_attempts}), tentando novamente em {delay}s",
        "send_exhausted": "Falha na requisição após {max_attempts} tentativas",
        "policy_rejected": "Requisição rejeitada com HTTP {status}, verificando plano novamente",
        "api_key_verified": "API key verificada",
        "api_key_invalid": "Falha na verificação da API key",
        "tier_changed": "Plano alterado: {old} -> {new}",
        "interval_changed": "Intervalo de atualização alterado para {minutes} minutos",
        "auto_update_enabled": "Atualização automática ativada (a cada {minutes} minutos)",
        "heartbeat_enabled": "Heartbeat ativado (a cada {minutes} minutos)",
        "heartbeat_disabled": "Heartbeat desativado",
        "webhook_registered": "Webhook registrado em {url}",
        "webhook_registration_failed": "Falha no registro automático do webhook",
        "vote_received": "Voto recebido",
    },
}


def resolve_locale(locale: str | EnumLocale | None) -> EnumLocale:
    """Map a locale selector such as ``"pt-BR"`` to a catalog locale."""
    if isinstance(locale, EnumLocale):
        return locale
    if not locale:
        return EnumLocale.EN
    language = locale.replace("_", "-").split("-", 1)[0].lower()
    try:
        return EnumLocale(language)
    except ValueError:
        return EnumLocale.EN


def get_message(key: str, locale: str | EnumLocale | None = None, **kwargs: object) -> str:
    """Return the localized message for ``key`` formatted with ``kwargs``.

    Raises:
        KeyError: If ``key`` is not in the English catalog.
    """
    catalog = _MESSAGES[resolve_locale(locale)]
    template = catalog.get(key) or _MESSAGES[EnumLocale.EN][key]
    return template.format(**kwargs) if kwargs else template


__all__: list[str] = ["get_message", "resolve_locale"]
