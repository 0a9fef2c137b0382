from fastapi import Request
from eventhub.db.repositories import Repository
from eventhub.core.logging import logger


def init_repository(app) -> Repository:
    """Create the process-wide store; all data is lost on restart."""
    repository = Repository()
    app.state.repository = repository
    logger.info("In-memory repository initialised")
    return repository


def get_repository(request: Request) -> Repository:
    return request.app.state.repository
