"""
Celery entry point: ``celery -A isave.worker:celery worker --beat``.
"""

from isave import create_app
from isave.celery_app import celery

app = create_app()
