"""
Environment lookup for request execution.

Converts stored environments into the read-only snapshots the resolver
works with, so later edits don't affect a send already in progress.
"""

from sqlalchemy.orm import Session

from ..exceptions import ResourceNotFoundError
from ..models.environment import Environment as EnvironmentModel
from ..schemas.environment import Environment, Variable


def to_snapshot(env: EnvironmentModel) -> Environment:
    """Freeze a stored environment and its variables, in insertion order."""
    return Environment(
        id=env.id,
        name=env.name,
        variables=tuple(Variable(key=var.key, value=var.value) for var in env.variables),
    )


def get_environment(db: Session, environment_id: int | None) -> Environment | None:
    """
    Get the specified environment, or the active one.

    Args:
        db: Database session
        environment_id: Specific environment ID, or None to use the active environment

    Returns:
        Environment snapshot, or None when no environment is active

    Raises:
        ResourceNotFoundError: If ``environment_id`` doesn't exist
    """
    if environment_id is not None:
        env = db.query(EnvironmentModel).filter(EnvironmentModel.id == environment_id).first()
        if env is None:
            raise ResourceNotFoundError("Environment", environment_id)
    else:
        env = db.query(EnvironmentModel).filter(EnvironmentModel.is_active.is_(True)).first()

    if env is None:
        return None

    return to_snapshot(env)
