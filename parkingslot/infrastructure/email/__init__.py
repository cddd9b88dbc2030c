from .sendgrid_sender import SendGridEmailSender

__all__ = ["SendGridEmailSender"]
