"""order_flow: customer orders whose lifecycle runs in a workflow engine.

Usage:
    from order_flow import OrderService, create_workflow_client

    workflow = create_workflow_client("camunda", base_url="http://localhost:8080/engine-rest")
    service = OrderService(workflow)
    order = service.place_order(items)
    service.mark_paid(order)
    service.status(order)
"""

from .application.orders import OrderService
from .config import WorkflowSettings
from .domain.workflow import WorkflowClient

_REGISTRY: dict[str, type] = {}


def _ensure_registry() -> None:
    """Lazily populate the registry on first use."""
    if _REGISTRY:
        return
    from .infra.camunda import CamundaRestClient
    from .infra.memory import InMemoryWorkflowEngine

    _REGISTRY["camunda"] = CamundaRestClient
    _REGISTRY["memory"] = InMemoryWorkflowEngine


def create_workflow_client(engine: str, **kwargs) -> WorkflowClient:
    """Create a WorkflowClient for the given engine.

    Args:
        engine: Engine name ('camunda' or 'memory').
        **kwargs: Passed to the adapter constructor.

    Raises:
        ValueError: If the engine is not supported.
    """
    _ensure_registry()
    cls = _REGISTRY.get(engine.lower())
    if cls is None:
        supported = ", ".join(sorted(_REGISTRY))
        raise ValueError(
            f"Unsupported engine: {engine!r}. Supported: {supported}"
        )
    return cls(**kwargs)


def create_workflow_client_from_settings(settings: WorkflowSettings) -> WorkflowClient:
    return create_workflow_client(settings.engine, **settings.client_kwargs())


__all__ = [
    "OrderService",
    "WorkflowClient",
    "WorkflowSettings",
    "create_workflow_client",
    "create_workflow_client_from_settings",
]
