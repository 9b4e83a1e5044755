"""
Owner notifications over Flask-Mail
"""
from flask import current_app
from flask_mail import Mail, Message

mail = Mail()

PAYMENT_SUBMITTED_BODY = """Hello {owner},

{payer} submitted a payment screenshot for the bill below.

Meter: {meter}
Units: {units}
Amount: {amount:.2f}
Due date: {due}

Please review the screenshot and approve or reject the payment.

Electricity Record
"""


def mail_configured():
    return bool(current_app.config.get('MAIL_SERVER') and current_app.config.get('MAIL_USERNAME'))


def send_email(subject, recipients, body):
    mail.send(Message(subject=subject, recipients=recipients, body=body))


def send_payment_submitted_email(record, owner, customer=None):
    """
    Tell the record owner that a payment screenshot is waiting for review.
    Returns False (and sends nothing) when mail is not configured.
    """
    if not mail_configured():
        current_app.logger.info("Mail not configured; skipping payment notification for record %s", record.id)
        return False

    body = PAYMENT_SUBMITTED_BODY.format(
        owner=owner.name,
        payer=customer.name if customer else owner.name,
        meter=record.meter_number,
        units=record.units_consumed,
        amount=float(record.total_amount or 0),
        due=record.due_date.isoformat() if record.due_date else 'N/A',
    )
    try:
        send_email(f"Payment submitted for meter {record.meter_number}", [owner.email], body)
    except Exception as e:
        current_app.logger.error(f"SMTP error sending payment notification to {owner.email}: {str(e)}", exc_info=True)
        raise
    return True
