"""Celery application factory"""
from celery import Celery
from celery.schedules import crontab

from barberbook.config.settings import get_settings

settings = get_settings()


def create_celery_app() -> Celery:
    """Create and configure the Celery app used by the worker and the API"""
    app = Celery(
        "barberbook",
        broker=settings.CELERY_BROKER_URL,
        backend=settings.CELERY_RESULT_BACKEND,
        include=[
            "barberbook.tasks.notification_tasks",
            "barberbook.tasks.appointment_tasks",
        ],
    )

    app.conf.update(
        task_serializer=settings.CELERY_TASK_SERIALIZER,
        result_serializer="json",
        accept_content=["json"],
        timezone=settings.DEFAULT_TIMEZONE,
        enable_utc=True,
        task_acks_late=True,
        worker_prefetch_multiplier=1,
        task_routes={
            "barberbook.tasks.notification_tasks.*": {"queue": "notifications"},
            "barberbook.tasks.appointment_tasks.*": {"queue": "maintenance"},
        },
        beat_schedule={
            "auto-complete-appointments": {
                "task": "barberbook.tasks.appointment_tasks.auto_complete_appointments",
                "schedule": crontab(minute="*/15"),
            },
        },
    )

    return app


celery_app = create_celery_app()
