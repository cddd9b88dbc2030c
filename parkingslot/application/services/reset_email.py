# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from html import escape

from parkingslot.application.interfaces import EmailMessage
from parkingslot.domain.users.entities import User

RESET_SUBJECT = "ParkingSlot Password Reset Link"

_RESET_TEMPLATE = """\
<html>
  <body style="font-family: Arial, sans-serif; color: #333;">
    <h2>Reset your ParkingSlot password</h2>
    <p>Hi {name},</p>
    <p>We received a request to reset the password for the account <b>{username}</b>.</p>
    <p>Click the button below to choose a new password. The link expires in {hours} hours.</p>
    <p>
      <a href="{link}" style="background:#1a73e8;color:#fff;padding:10px 18px;
         border-radius:4px;text-decoration:none;">Reset password</a>
    </p>
    <p>If you did not request a password reset you can safely ignore this email.</p>
  </body>
</html>
"""


def build_reset_link(frontend_url: str, user_id: str, token: str) -> str:
    return f"{frontend_url.rstrip('/')}/resetpassword/{user_id}/{token}"


def render_password_reset_email(user: User, link: str, *, valid_hours: int = 24) -> EmailMessage:
    name = " ".join(part for part in (user.first_name, user.last_name) if part) or user.username
    html = _RESET_TEMPLATE.format(
        name=escape(name),
        username=escape(user.username),
        hours=valid_hours,
        link=escape(link, quote=True),
    )
    return EmailMessage(
        to_email=user.email,
        to_name=name,
        subject=RESET_SUBJECT,
        html_body=html,
    )


__all__ = ["RESET_SUBJECT", "build_reset_link", "render_password_reset_email"]
