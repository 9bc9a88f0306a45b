from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail
from flask import current_app


class MailError(Exception):
    """Outbound email could not be handed to the provider."""


def send_mail(to_email, subject, html):
    api_key = current_app.config.get('SENDGRID_API_KEY')
    if not api_key:
        raise MailError('SENDGRID_API_KEY is not configured')
    sg = SendGridAPIClient(api_key=api_key)
    message = Mail(from_email=(current_app.config['MAIL_FROM'], current_app.config['MAIL_FROM_NAME']),
                   to_emails=to_email,
                   subject=subject,
                   html_content=html)
    try:
        resp = sg.send(message)
    except Exception as e:
        raise MailError(f'Failed to send email to {to_email}: {e}') from e
    if resp.status_code >= 400:
        raise MailError(f'Mail provider rejected message to {to_email}: HTTP {resp.status_code}')
    return resp.status_code, getattr(resp, 'headers', None)
