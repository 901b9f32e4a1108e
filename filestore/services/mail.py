from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail
from flask import current_app


def send_welcome(to_email):
    sg = SendGridAPIClient(api_key=current_app.config['SENDGRID_API_KEY'])
    message = Mail(from_email=(current_app.config['MAIL_FROM'], current_app.config['MAIL_FROM_NAME']),
                   to_emails=to_email,
                   subject="Welcome!",
                   html_content=f"<p>Welcome {to_email}!</p>")
    resp = sg.send(message)
    return resp.status_code, getattr(resp, 'headers', None)
