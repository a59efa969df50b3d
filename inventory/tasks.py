"""
Inventory — Celery Tasks

Periodic batch lifecycle automation.

@file inventory/tasks.py
"""

import logging

from celery import shared_task

logger = logging.getLogger('padbank')


@shared_task(name='inventory.expire_overdue_batches')
def expire_overdue_batches_task():
    """
    Daily task: recompute batches whose expiry date has passed so reads
    see status=expired without waiting for the next ledger mutation.
    Registered with Celery Beat to run shortly after local midnight.
    """
    from .services import BatchService

    count = BatchService.expire_overdue_batches()
    logger.info('expire_overdue_batches_task completed: %d batches expired.', count)
    return {'expired_count': count}
