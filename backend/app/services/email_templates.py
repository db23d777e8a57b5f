"""HTML bodies for transactional emails."""

import html

WELCOME_SUBJECT = "Welcome to Our Salon - Next Steps"


def stylist_welcome_html(name: str, role: str) -> str:
    """Welcome email sent to a newly added stylist."""
    safe_name = html.escape(name)
    safe_role = html.escape(role)
    return f"""\
<div style="font-family: Arial, sans-serif; max-width: 560px; margin: 0 auto; color: #222;">
  <h2 style="color: #8a4baf;">Welcome to the team, {safe_name}!</h2>
  <p>We're excited to have you join our salon as a <strong>{safe_role}</strong>.</p>
  <p>Here's what happens next:</p>
  <ol>
    <li>Our front desk will reach out to set up your schedule.</li>
    <li>Bring a photo ID and any certifications on your first day.</li>
    <li>Reply to this email if any of your details need correcting.</li>
  </ol>
  <p>See you soon!</p>
  <p style="color: #888; font-size: 12px;">This is an automated message.</p>
</div>
"""
