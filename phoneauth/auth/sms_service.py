"""
SMS Service for OTP delivery
Supports MSG91 and a console provider for local development
"""

import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import logging

import httpx

from phoneauth.core.exceptions import DeliveryError

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("msg91", "console")


class SMSService:
    """
    Sends OTP codes by SMS.

    Every failure (configuration, transport, provider rejection) raises
    DeliveryError. There is no retry; the caller decides what to do.
    """

    def __init__(
        self,
        provider: str = "msg91",
        auth_key: Optional[str] = None,
        template_id: Optional[str] = None,
        api_url: str = "https://control.msg91.com/api/v5/otp",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.provider = provider
        self.auth_key = auth_key
        self.template_id = template_id
        self.api_url = api_url
        self.timeout = timeout
        # injected in tests to stub the HTTP layer
        self._transport = transport

    @classmethod
    def from_settings(cls, settings) -> "SMSService":
        return cls(
            provider=settings.SMS_PROVIDER,
            auth_key=settings.MSG91_AUTH_KEY,
            template_id=settings.MSG91_TEMPLATE_ID,
            api_url=settings.MSG91_API_URL,
            timeout=settings.SMS_TIMEOUT_SECONDS
        )

    async def send_otp(self, phone_number: str, otp_code: str) -> Dict[str, Any]:
        """
        Send OTP code via SMS

        Args:
            phone_number: Recipient phone number
            otp_code: 6-digit OTP code

        Returns:
            Dict with provider and message details

        Raises:
            DeliveryError: the message could not be handed to the provider
        """
        mobile = self._format_phone_number(phone_number)
        if not mobile:
            raise DeliveryError(reason="invalid_phone")

        if self.provider == "msg91":
            result = await self._send_via_msg91(mobile, otp_code)
        elif self.provider == "console":
            result = self._send_via_console(mobile, otp_code)
        else:
            logger.error(f"Unsupported SMS provider: {self.provider}")
            raise DeliveryError(reason="unsupported_provider")

        logger.info(f"OTP SMS sent via {self.provider} to: {phone_number}")
        return result

    async def _send_via_msg91(self, mobile: str, otp_code: str) -> Dict[str, Any]:
        """
        Send OTP through the MSG91 OTP API

        Args:
            mobile: Digits-only phone number with country code
            otp_code: Code to deliver

        Returns:
            Dict with send status
        """
        if not self.auth_key or not self.template_id:
            logger.error("MSG91 not properly configured")
            raise DeliveryError(reason="configuration_error")

        params = {
            "template_id": self.template_id,
            "mobile": mobile,
            "otp": otp_code
        }
        headers = {"authkey": self.auth_key, "accept": "application/json"}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.api_url, params=params, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"MSG91 transport error: {e}")
            raise DeliveryError(reason="transport_error")

        if response.status_code >= 400:
            logger.error(f"MSG91 API error: {response.status_code} - {response.text}")
            raise DeliveryError(reason="api_error")

        try:
            body = response.json()
        except ValueError:
            logger.error(f"MSG91 returned a non-JSON body: {response.text[:200]}")
            raise DeliveryError(reason="api_error")

        if body.get("type") != "success":
            logger.error(f"MSG91 rejected OTP send: {body.get('message')}")
            raise DeliveryError(reason="provider_rejected")

        return {
            "success": True,
            "provider": "msg91",
            "message_id": body.get("request_id"),
            "sent_at": datetime.now(timezone.utc).isoformat()
        }

    def _send_via_console(self, mobile: str, otp_code: str) -> Dict[str, Any]:
        # development only: the code ends up in the log
        logger.warning(f"SIMULATED SMS to {mobile}: your verification code is {otp_code}")
        return {
            "success": True,
            "provider": "console",
            "message_id": None,
            "sent_at": datetime.now(timezone.utc).isoformat()
        }

    def _format_phone_number(self, phone_number: str) -> Optional[str]:
        """
        Strip formatting for the gateway

        Returns:
            Digits only (country code included), or None if the result
            is not 7-15 digits long
        """
        digits = re.sub(r"\D", "", phone_number or "")
        if len(digits) < 7 or len(digits) > 15:
            return None
        return digits

    def validate_sms_config(self) -> Dict[str, Any]:
        """
        Validate SMS configuration for current provider

        Returns:
            Dict with validation status
        """
        issues = []

        if self.provider not in SUPPORTED_PROVIDERS:
            issues.append(f"Unsupported provider: {self.provider}")
        elif self.provider == "msg91":
            if not self.auth_key:
                issues.append("MSG91 auth key not configured")
            if not self.template_id:
                issues.append("MSG91 template ID not configured")

        return {
            "valid": len(issues) == 0,
            "provider": self.provider,
            "issues": issues
        }
