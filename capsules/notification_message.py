from django.conf import settings


NOTIFICATIONS = {
    # ---------------- Personal capsule ----------------
    "personal_capsule_unlocked": {  # creator, capsule lock date passed
        "subject": "Your Personal Capsule Has Unlocked!",
        "message": (
            "Hi {name},\n\n"
            "Your personal capsule titled \"{title}\" has unlocked. You can now view its content.\n\n"
            "Access your capsule here: {link}\n\n"
            "Note: You'll need to log in to access the capsule.\n\n"
            "Regards,\nDigital Time Capsule Team"
        ),
    },

    # ---------------- Collaborative capsule ----------------
    "collaborative_memory_unlocked": {  # every member, entry lock date passed
        "subject": "Memory Unlocked in Capsule: {title}",
        "message": (
            "Hi {name},\n\n"
            "A memory added by {author} in the collaborative capsule \"{title}\" has unlocked.\n\n"
            "You can view it here: {link}\n\n"
            "Note: You'll need to log in to access the capsule.\n\n"
            "Regards,\nDigital Time Capsule Team"
        ),
    },
}


def capsule_link(capsule):
    return f"{settings.FRONTEND_URL.rstrip('/')}/capsules/{capsule.pk}"


def build_message(notification_key, **context):
    """Return ``(subject, body)`` for a notification key."""
    notification_data = NOTIFICATIONS[notification_key]
    subject = notification_data["subject"].format(**context)
    body = notification_data["message"].format(**context)
    return subject, body
