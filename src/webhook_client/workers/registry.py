"""Worker registry mapping task refs to worker classes."""

from webhook_client.workers.base import ProcessWebhookWorker


def _build_registry() -> dict[str, type[ProcessWebhookWorker]]:
    from webhook_client.workers.process_webhook import LogWebhookCallWorker

    return {
        "process_webhook": LogWebhookCallWorker,
    }


_registry: dict[str, type[ProcessWebhookWorker]] = {}


def _ensure_registry() -> None:
    if not _registry:
        _registry.update(_build_registry())


def register_worker(task_ref: str, worker_class: type[ProcessWebhookWorker]) -> None:
    """Register a worker class for a task ref."""
    _ensure_registry()
    _registry[task_ref] = worker_class


def is_registered(task_ref: str) -> bool:
    _ensure_registry()
    return task_ref in _registry


def registered_task_refs() -> list[str]:
    _ensure_registry()
    return sorted(_registry)


def get_worker(task_ref: str) -> ProcessWebhookWorker | None:
    """Get a worker instance for a task ref."""
    _ensure_registry()
    cls = _registry.get(task_ref)
    return cls() if cls else None
