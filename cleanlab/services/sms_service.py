"""
SMS Service using Twilio
"""
from cleanlab.config import settings
from cleanlab.logger import logger
from twilio.rest import Client


class TwilioService:
    """Service to send SMS using Twilio"""

    def __init__(self):
        self.account_sid = settings.twilio_account_sid
        self.auth_token = settings.twilio_auth_token
        self.phone_number = settings.twilio_phone_number
        self.client = None
        self._init_client()

    def _init_client(self):
        """Initialize Twilio client"""
        try:
            if self.account_sid and self.auth_token:
                self.client = Client(self.account_sid, self.auth_token)
        except Exception as e:
            logger.warning(f"Failed to initialize Twilio: {e}")

    def send_sms(self, to_number: str, message: str) -> dict:
        """
        Send SMS using Twilio.

        Args:
            to_number: Recipient phone number
            message: Message to send

        Returns:
            dict with SMS status
        """
        try:
            if not self.client:
                return {
                    "status": "success",
                    "to": to_number,
                    "message": message,
                    "note": "Twilio not configured - running in test mode"
                }

            sms = self.client.messages.create(
                body=message,
                from_=self.phone_number,
                to=to_number
            )

            return {
                "status": "success",
                "to": to_number,
                "message": message,
                "sid": sms.sid
            }

        except Exception as e:
            logger.error(f"Error sending SMS: {e}")
            return {
                "status": "error",
                "message": f"Error sending SMS: {str(e)}"
            }

    def send_verification_code(self, phone_number: str, code: str) -> dict:
        """
        Send the phone verification code.

        Args:
            phone_number: Customer phone number
            code: Six digit verification code

        Returns:
            dict with SMS status
        """
        minutes = settings.verification_code_ttl_minutes
        message = f"Your {settings.app_name} verification code is {code}. It expires in {minutes} minutes."
        return self.send_sms(phone_number, message)

    def send_booking_confirmation(self, phone_number: str, booking: dict) -> dict:
        """
        Send booking code and slot after a booking is created.

        Args:
            phone_number: Customer phone number
            booking: Booking as returned by the booking service

        Returns:
            dict with SMS status
        """
        message = (
            f"{settings.app_name}: booking {booking['booking_code']} received for "
            f"{booking['service_name']} on {booking['scheduled_date']} at {booking['scheduled_time']}. "
            f"Use this code to view or change your booking."
        )
        return self.send_sms(phone_number, message)


# Global instance
_twilio_service = None


def get_twilio_service() -> TwilioService:
    """Get or create Twilio service instance"""
    global _twilio_service
    if _twilio_service is None:
        _twilio_service = TwilioService()
    return _twilio_service


def send_verification_code(phone_number: str, code: str) -> dict:
    """Send verification code - convenience function"""
    return get_twilio_service().send_verification_code(phone_number, code)


def send_booking_confirmation(phone_number: str, booking: dict) -> dict:
    """Send booking confirmation - convenience function"""
    return get_twilio_service().send_booking_confirmation(phone_number, booking)
