from celery.schedules import crontab
from celery import Celery, Task
from flask import has_app_context
from isave.config import CELERY_BROKER_URL, CELERY_RESULT_BACKEND


class ContextTask(Task):
    """Runs every task inside the Flask application context."""

    def __call__(self, *args, **kwargs):
        flask_app = getattr(self.app, "flask_app", None)
        if flask_app is not None and not has_app_context():
            with flask_app.app_context():
                return self.run(*args, **kwargs)
        return self.run(*args, **kwargs)


def make_celery():
    """
    Create the Celery instance tasks register against.

    The Flask app is attached later by ``init_celery`` so task modules can
    import ``celery`` without importing the application factory.
    """

    celery = Celery(
        "isave",
        broker=CELERY_BROKER_URL,
        backend=CELERY_RESULT_BACKEND,
        task_cls=ContextTask,
        include=[
            "isave.modules.save_plan.tasks",
            "isave.modules.notification.tasks",
        ],
    )

    celery.conf.update(
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        timezone="UTC",
        task_track_started=True,
        worker_max_tasks_per_child=1000,
        task_acks_late=True,
    )

    celery.conf.beat_schedule = {
        "process-auto-save-deductions": {
            "task": "process_auto_save_deductions",
            "schedule": crontab(minute=0),  # hourly
        },
    }

    celery.flask_app = None
    return celery


def init_celery(app):
    """Bind the shared Celery instance to ``app`` and its configuration."""
    celery.conf.update(
        broker_url=app.config.get("CELERY_BROKER_URL", CELERY_BROKER_URL),
        result_backend=app.config.get("CELERY_RESULT_BACKEND", CELERY_RESULT_BACKEND),
        task_always_eager=app.config.get("CELERY_TASK_ALWAYS_EAGER", False),
        task_eager_propagates=app.config.get("CELERY_TASK_ALWAYS_EAGER", False),
    )
    celery.flask_app = app
    return celery


celery = make_celery()
