from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from html import escape
from typing import Optional

from ..core.constants import ONBOARDING_DEADLINE_DAYS


@dataclass(frozen=True)
class OfferLetter:
    subject: str
    text: str
    html: str


def build_offer_letter(
    *,
    company_name: str,
    position: str,
    username: str,
    password: Optional[str],
    signed_by: str,
    today: date,
) -> OfferLetter:
    """Offer-of-employment email with portal credentials.

    ``password`` is None when the applicant chose one at registration; the
    letter then refers them to it instead of repeating it.
    """
    deadline = (today + timedelta(days=ONBOARDING_DEADLINE_DAYS)).strftime("%B %d, %Y")
    password_line = password if password else "the password you chose when applying"
    subject = f"Congratulations! Offer of Employment at {company_name}"

    text = (
        f"Congratulations! You have been selected for the position of {position} at {company_name}. "
        f"Your username is {username} and your password is {password_line}. "
        f"Please complete onboarding before {deadline}."
    )

    html = f"""
<h2>{escape(subject)}</h2>
<p>Greetings from {escape(company_name)}!</p>
<p>We are pleased to inform you that you have been selected for the position of
<strong>{escape(position)}</strong> at {escape(company_name)}.</p>
<p>Below are your login credentials for the employee portal:</p>
<ul>
  <li><strong>Username:</strong> {escape(username)}</li>
  <li><strong>Password:</strong> {escape(password_line)}</li>
</ul>
<p>Please log in and complete the onboarding formalities before {escape(deadline)}.</p>
<p>Welcome aboard!</p>
<p>Best Regards,<br>{escape(signed_by)}<br>HR Department<br>{escape(company_name)}</p>
"""
    return OfferLetter(subject=subject, text=text, html=html)
