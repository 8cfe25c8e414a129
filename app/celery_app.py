from celery import Celery

from app.config import settings

# Redis URL for broker and result backend
REDIS_URL = settings.redis_url

# Create Celery app
celery_app = Celery(
    "socialhub",
    broker=REDIS_URL,
    backend=REDIS_URL,
    include=["app.tasks"],  # Auto-discover tasks from this module
)

# Celery configuration
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=300,
    task_soft_time_limit=270,
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=100,  # Restart worker after 100 tasks to prevent memory leaks
)
