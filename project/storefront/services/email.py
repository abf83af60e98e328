# storefront/services/email.py
# Отправка писем через Resend (REST API)

import requests

from storefront.exceptions import UpstreamFailure

RESEND_API_URL = "https://api.resend.com/emails"


def send_email(
    api_key: str,
    from_email: str,
    to: str,
    subject: str,
    text: str,
    html: str,
    timeout: float = 10,
) -> str:
    """
    Синхронная отправка одного письма. Возвращает id письма у провайдера,
    при любой ошибке: UpstreamFailure.
    """
    payload = {
        "from": from_email,
        "to": [to],
        "subject": subject,
        "text": text,
        "html": html,
    }
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }

    try:
        response = requests.post(RESEND_API_URL, json=payload, headers=headers, timeout=timeout)
    except requests.RequestException as e:
        raise UpstreamFailure("Email send failed", details=str(e)) from e

    if response.status_code >= 400:
        raise UpstreamFailure("Email send failed", details=f"{response.status_code}: {response.text}")

    try:
        return response.json().get("id", "")
    except ValueError:
        return ""
