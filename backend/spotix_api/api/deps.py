"""Wiring for route handlers.

Every outbound client is built from the Settings dependency so tests can swap
either the settings or the client itself through ``app.dependency_overrides``.
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from spotix_api.core.config import Settings, get_settings
from spotix_api.db.session import get_db
from spotix_api.services.enhancer import GeminiClient
from spotix_api.services.issuance import TicketIssuance
from spotix_api.services.mailer import MailerSendClient, MailjetClient
from spotix_api.services.paystack import PaystackClient
from spotix_api.services.reference_store import ReferenceStore
from spotix_api.services.side_calls import AuxiliaryFunctions
from spotix_api.services.webhooks import WebhookProcessor

def get_reference_store(db: Session = Depends(get_db)) -> ReferenceStore:
    return ReferenceStore(db)

def get_paystack(settings: Settings = Depends(get_settings)) -> PaystackClient:
    return PaystackClient(settings.paystack_secret_key, settings.paystack_base_url, timeout=settings.outbound_timeout_seconds)

def get_mailer(settings: Settings = Depends(get_settings)) -> MailerSendClient:
    return MailerSendClient(settings.mailersend_api_key, timeout=settings.outbound_timeout_seconds)

def get_mailjet(settings: Settings = Depends(get_settings)) -> MailjetClient:
    return MailjetClient(settings.mailjet_public_key, settings.mailjet_private_key, timeout=settings.outbound_timeout_seconds)

def get_gemini(settings: Settings = Depends(get_settings)) -> GeminiClient:
    return GeminiClient(settings.gemini_api_key, settings.gemini_model, timeout=max(settings.outbound_timeout_seconds, 30.0))

def get_aux_functions(settings: Settings = Depends(get_settings)) -> AuxiliaryFunctions:
    return AuxiliaryFunctions(settings.atomic_function_url, settings.analytics_function_url, timeout=settings.outbound_timeout_seconds)

def get_issuance(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    functions: AuxiliaryFunctions = Depends(get_aux_functions),
    mailer: MailerSendClient = Depends(get_mailer),
) -> TicketIssuance:
    return TicketIssuance(db, settings, functions, mailer)

def get_webhook_processor(
    store: ReferenceStore = Depends(get_reference_store),
    settings: Settings = Depends(get_settings),
) -> WebhookProcessor:
    return WebhookProcessor(store, settings.paystack_secret_key, settings.webhook_require_ticket_purchase)
