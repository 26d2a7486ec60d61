'''
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# Created Date: Thu Aug 07 2025
# SPDX-License-Identifier: MIT
'''

import html
import logging
from typing import Optional

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from mauka.config import settings
from mauka.db import models

logger = logging.getLogger(__name__)


class EmailService:
    def __init__(self):
        self.sg = SendGridAPIClient(settings.sendgrid_api_key)
        self.sender_email = settings.mail_sender_email
        self.sender_name = settings.mail_sender_name

    async def send_new_application_notification(
        self,
        ngo: models.NGOApplication,
        opportunity: models.VolunteerOpportunity,
        volunteer: Optional[models.UserProfile],
    ):
        """
        Tells the NGO that a volunteer applied to one of its opportunities.
        """
        volunteer_name = html.escape(volunteer.full_name) if volunteer else "A volunteer"
        skills = html.escape(", ".join(volunteer.skills or [])) if volunteer else ""
        city = html.escape((volunteer.city if volunteer else None) or "N/A")
        organization_name = html.escape(ngo.organization_name)
        title = html.escape(opportunity.title)
        subject = f"New application for {opportunity.title}"
        html_content = f"""
        <html>
        <body>
            <p>Hi {organization_name},</p>
            <p>{volunteer_name} has applied to your opportunity:</p>
            <h3>{title}</h3>
            <ul>
                <li><strong>City:</strong> {city}</li>
                <li><strong>Skills:</strong> {skills or 'N/A'}</li>
            </ul>
            <p>Review it from the Manage Applications page.</p>
            <p>Best regards,</p>
            <p>{self.sender_name}</p>
        </body>
        </html>
        """
        await self._send_email(ngo.email, subject, html_content)

    async def send_ngo_verification_notification(self, ngo: models.NGOApplication):
        """
        Tells the NGO the outcome of its verification review.
        """
        if ngo.verification_status == "approved":
            subject = "Your organization has been verified"
            outcome = "<p>Your opportunities are now visible to volunteers.</p>"
        else:
            subject = "Update on your organization's verification"
            outcome = "<p>Your verification request was not approved.</p>"
        organization_name = html.escape(ngo.organization_name)
        notes = f"<p><strong>Notes from the reviewer:</strong> {html.escape(ngo.admin_notes)}</p>" if ngo.admin_notes else ""
        html_content = f"""
        <html>
        <body>
            <p>Hi {organization_name},</p>
            {outcome}
            {notes}
            <p>Best regards,</p>
            <p>{self.sender_name}</p>
        </body>
        </html>
        """
        await self._send_email(ngo.email, subject, html_content)

    async def _send_email(self, to_email: str, subject: str, html_content: str):
        """
        Internal helper to send an email using SendGrid.
        Delivery failures are logged; notifications never fail the request that triggered them.
        """
        message = Mail(
            from_email=(self.sender_email, self.sender_name),
            to_emails=to_email,
            subject=subject,
            html_content=html_content
        )
        try:
            response = self.sg.send(message)
            logger.info("Email sent to %s. Status Code: %s", to_email, response.status_code)
        except Exception as e:
            logger.error("Error sending email to %s: %s", to_email, e)
