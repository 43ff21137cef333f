"""
FastAPI dependencies shared by the routers
"""
from caseflow.services.lifecycle import LifecycleOrchestrator, lifecycle


def get_lifecycle() -> LifecycleOrchestrator:
    """Lifecycle orchestrator used by the request handlers"""
    return lifecycle
