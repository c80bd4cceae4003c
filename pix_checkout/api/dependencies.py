"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from pix_checkout.infrastructure.clients.webhook import OrderWebhookClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_webhook_client() -> OrderWebhookClient:
    """Provide order webhook client instance"""
    return OrderWebhookClient()
