from clinicops.domains.scheduling.infrastructure.external.email.smtp_notifier import SmtpMeetingNotifier

__all__ = ["SmtpMeetingNotifier"]
