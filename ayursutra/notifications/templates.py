"""
HTML bodies for transactional emails.
"""
from datetime import datetime
from html import escape

BRAND_COLOR = "#2c5530"

_WRAPPER = '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">{body}</div>'
_SIGNATURE = "<br><p>Best regards,<br>The AyurSutra Team</p>"
_DETAILS = '<div style="background-color: #f5f5f5; padding: 20px; border-radius: 5px; margin: 20px 0;">{rows}</div>'


def _render(body: str) -> str:
    return _WRAPPER.format(body=body + _SIGNATURE)


def _heading(text: str) -> str:
    return f'<h2 style="color: {BRAND_COLOR};">{text}</h2>'


def _format_date(value) -> str:
    if isinstance(value, datetime):
        return value.strftime("%B %d, %Y")
    return escape(str(value or ""))


def welcome_email(name: str, email: str, clinic_name: str = "") -> str:
    return _render(
        _heading("Welcome to AyurSutra!")
        + f"<p>Dear {escape(name)},</p>"
        + "<p>Welcome to AyurSutra, your comprehensive Panchakarma management system!</p>"
        + "<p>Your account has been successfully created with the following details:</p>"
        + "<ul>"
        + f"<li><strong>Name:</strong> {escape(name)}</li>"
        + f"<li><strong>Email:</strong> {escape(email)}</li>"
        + f"<li><strong>Clinic:</strong> {escape(clinic_name or 'Not specified')}</li>"
        + "</ul>"
        + "<p>You can now start managing your patients and therapy schedules efficiently.</p>"
    )


def appointment_reminder_email(patient_name: str, therapy_name: str, scheduled_date,
                               scheduled_time: str, status: str) -> str:
    return _render(
        _heading("Appointment Reminder")
        + f"<p>Dear {escape(patient_name)},</p>"
        + "<p>This is a reminder about your upcoming appointment:</p>"
        + _DETAILS.format(rows=(
            "<h3>Appointment Details</h3>"
            f"<p><strong>Therapy:</strong> {escape(therapy_name)}</p>"
            f"<p><strong>Date:</strong> {_format_date(scheduled_date)}</p>"
            f"<p><strong>Time:</strong> {escape(scheduled_time or 'To be confirmed')}</p>"
            f"<p><strong>Status:</strong> {escape(status)}</p>"
        ))
        + "<p>Please arrive 15 minutes before your scheduled time.</p>"
        + "<p>If you need to reschedule or cancel, please contact us as soon as possible.</p>"
    )


def therapy_completion_email(patient_name: str, therapy_name: str, scheduled_date, status: str) -> str:
    return _render(
        _heading("Therapy Session Completed")
        + f"<p>Dear {escape(patient_name)},</p>"
        + "<p>Your therapy session has been completed successfully!</p>"
        + _DETAILS.format(rows=(
            "<h3>Session Details</h3>"
            f"<p><strong>Therapy:</strong> {escape(therapy_name)}</p>"
            f"<p><strong>Date:</strong> {_format_date(scheduled_date)}</p>"
            f"<p><strong>Status:</strong> {escape(status)}</p>"
        ))
        + "<p>Please follow any post-therapy instructions provided by your practitioner.</p>"
    )


def password_reset_email(reset_url: str, expire_minutes: int) -> str:
    url = escape(reset_url, quote=True)
    return _render(
        _heading("Password Reset Request")
        + "<p>You have requested to reset your password for your AyurSutra account.</p>"
        + "<p>Click the button below to reset your password:</p>"
        + '<div style="text-align: center; margin: 30px 0;">'
        + f'<a href="{url}" style="background-color: {BRAND_COLOR}; color: white; padding: 12px 24px; '
        + 'text-decoration: none; border-radius: 5px; display: inline-block;">Reset Password</a></div>'
        + "<p>If the button doesn't work, copy and paste this link into your browser:</p>"
        + f'<p style="word-break: break-all; color: #666;">{url}</p>'
        + f"<p><strong>This link will expire in {expire_minutes} minutes.</strong></p>"
        + "<p>If you didn't request this password reset, please ignore this email.</p>"
    )


def password_changed_email(name: str) -> str:
    return _render(
        _heading("Password Changed")
        + f"<p>Dear {escape(name)},</p>"
        + "<p>The password for your AyurSutra account was just changed.</p>"
        + "<p>If you did not make this change, request a new password reset immediately.</p>"
    )


def diagnostic_email(timestamp: datetime) -> str:
    return _render(
        _heading("Test Email")
        + "<p>This is a test email from your AyurSutra backend system.</p>"
        + "<p>If you're receiving this email, the email functionality is working correctly!</p>"
        + f"<p>Timestamp: {timestamp.isoformat()}</p>"
    )
