"""
Módulo de notificações: e-mails transacionais e outbox.
"""

from storefront.notifications.base import BaseEmailSender
from storefront.notifications.brevo import BrevoEmailSender
from storefront.notifications.rendering import render_confirmation_email
from storefront.notifications.notifier import ConfirmationNotifier

__all__ = [
    "BaseEmailSender",
    "BrevoEmailSender",
    "render_confirmation_email",
    "ConfirmationNotifier",
]
