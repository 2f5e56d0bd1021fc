"""Transactional email via the Mailgun HTTP API. Sends are best-effort: a
failed or unconfigured send is logged and never fails the request."""
import logging

import httpx

from app.config import get_settings

log = logging.getLogger("uvicorn.error")

MAILGUN_US_BASE = "https://api.mailgun.net"


def mailgun_configured() -> bool:
    s = get_settings()
    return bool(s.mailgun_api_key and s.mailgun_domain)


def send_email(to_email: str, subject: str, html_content: str, text_content: str | None = None) -> bool:
    """Send email via Mailgun. Returns True if the API accepted it."""
    settings = get_settings()
    if not mailgun_configured():
        log.info("[Email] NOT SENT (Mailgun not configured): to=%s subject=%s", to_email, subject)
        return False

    base = (settings.mailgun_base_url or MAILGUN_US_BASE).strip().rstrip("/")
    domain = settings.mailgun_domain.lower()
    from_addr = settings.mailgun_from_email
    from_domain = from_addr.split("@")[-1].lower() if "@" in from_addr else ""
    if from_domain != domain:
        # Mailgun drops mail whose sender domain differs from the sending domain
        from_addr = f"noreply@{domain}"
    data = {
        "from": f"{settings.mailgun_from_name} <{from_addr}>",
        "to": to_email,
        "subject": subject,
        "text": text_content or "",
        "html": html_content or "",
    }
    try:
        with httpx.Client(timeout=10.0) as client:
            r = client.post(f"{base}/v3/{domain}/messages", auth=("api", settings.mailgun_api_key), data=data)
    except httpx.HTTPError as e:
        log.warning("[Mailgun] Request error: to=%s error=%s: %s", to_email, type(e).__name__, e)
        return False
    if 200 <= r.status_code < 300:
        log.info("[Mailgun] Sent: to=%s subject=%s", to_email, subject)
        return True
    log.warning("[Mailgun] API failed: status=%s to=%s body=%s", r.status_code, to_email, r.text[:500])
    return False


def send_sponsor_approved_email(to_email: str, name: str | None = None) -> bool:
    """Sponsor application approved: the account can now log in."""
    name = (name or "").strip() or "there"
    subject = "[SponsorHub] Your sponsor account is approved"
    text = f"Hi {name}, your SponsorHub sponsor application was approved. You can now log in with the email and password you signed up with."
    html = f"""
    <p>Hi {name},</p>
    <p>Your <strong>SponsorHub</strong> sponsor application was approved.</p>
    <p>You can now log in with the email and password you signed up with and start browsing events.</p>
    <p>- SponsorHub</p>
    """
    return send_email(to_email, subject, html, text_content=text)


def send_sponsor_rejected_email(to_email: str, name: str | None = None) -> bool:
    name = (name or "").strip() or "there"
    subject = "[SponsorHub] Your sponsor application"
    text = f"Hi {name}, unfortunately your SponsorHub sponsor application was not approved."
    html = f"""
    <p>Hi {name},</p>
    <p>Unfortunately your <strong>SponsorHub</strong> sponsor application was not approved.</p>
    <p>- SponsorHub</p>
    """
    return send_email(to_email, subject, html, text_content=text)


def send_agent_assigned_email(to_email: str, name: str | None, event_title: str, agent_name: str) -> bool:
    """Tell a deal party that an agent picked up their deal."""
    name = (name or "").strip() or "there"
    subject = f"[SponsorHub] An agent is now mediating your deal for {event_title}"
    text = f"Hi {name}, {agent_name} has been assigned to your sponsorship deal for {event_title}. Log in to continue the negotiation."
    html = f"""
    <p>Hi {name},</p>
    <p><strong>{agent_name}</strong> has been assigned to your sponsorship deal for <strong>{event_title}</strong>.</p>
    <p>Log in to continue the negotiation in the deal chat.</p>
    <p>- SponsorHub</p>
    """
    return send_email(to_email, subject, html, text_content=text)


def send_deal_status_email(to_email: str, name: str | None, event_title: str, status: str) -> bool:
    name = (name or "").strip() or "there"
    subject = f"[SponsorHub] Deal for {event_title} is now {status}"
    html = f"""
    <p>Hi {name},</p>
    <p>Your sponsorship deal for <strong>{event_title}</strong> is now <strong>{status}</strong>.</p>
    <p>- SponsorHub</p>
    """
    return send_email(to_email, subject, html)
