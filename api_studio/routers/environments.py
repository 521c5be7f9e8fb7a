"""
Environment management API routes.

Provides CRUD operations for environments and their variables. The active
environment supplies the values for {{variable}} placeholders when a tab
is sent without an explicit environment.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.environment import Environment, Variable
from ..schemas.environment import (
    EnvironmentCreate,
    EnvironmentUpdate,
    EnvironmentWithVariables,
    VariableCreate,
    VariableUpdate,
    VariableResponse,
)


router = APIRouter(prefix="/api/environments", tags=["environments"])


def _get_or_404(db: Session, environment_id: int) -> Environment:
    db_environment = db.query(Environment).filter(Environment.id == environment_id).first()
    if db_environment is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Environment with id {environment_id} not found"
        )
    return db_environment


def _deactivate_others(db: Session, environment_id: int | None = None) -> None:
    query = db.query(Environment).filter(Environment.is_active.is_(True))
    if environment_id is not None:
        query = query.filter(Environment.id != environment_id)
    query.update({"is_active": False})


# Environment endpoints

@router.post("", response_model=EnvironmentWithVariables, status_code=status.HTTP_201_CREATED)
def create_environment(environment_data: EnvironmentCreate, db: Session = Depends(get_db)):
    """
    Create a new environment with optional initial variables.

    If is_active is True, all other environments will be deactivated.
    Variables keep the order they are given in.
    """
    if environment_data.is_active:
        _deactivate_others(db)

    db_environment = Environment(
        name=environment_data.name,
        is_active=environment_data.is_active,
    )
    db.add(db_environment)
    db.flush()  # Get the ID before adding variables

    for var_data in environment_data.variables:
        db.add(Variable(
            environment_id=db_environment.id,
            key=var_data.key,
            value=var_data.value,
        ))

    db.commit()
    db.refresh(db_environment)
    return db_environment


@router.get("", response_model=list[EnvironmentWithVariables])
def list_environments(db: Session = Depends(get_db)):
    """List all environments with their variables."""
    return db.query(Environment).order_by(Environment.id).all()


@router.get("/active", response_model=EnvironmentWithVariables | None)
def get_active_environment(db: Session = Depends(get_db)):
    """Get the active environment, or null when none is active."""
    return db.query(Environment).filter(Environment.is_active.is_(True)).first()


@router.get("/{environment_id}", response_model=EnvironmentWithVariables)
def get_environment(environment_id: int, db: Session = Depends(get_db)):
    """
    Get an environment by ID with all its variables.

    Raises:
        HTTPException: 404 if environment not found
    """
    return _get_or_404(db, environment_id)


@router.put("/{environment_id}", response_model=EnvironmentWithVariables)
def update_environment(
    environment_id: int,
    environment_data: EnvironmentUpdate,
    db: Session = Depends(get_db)
):
    """
    Update an existing environment.

    If is_active is set to True, all other environments will be deactivated.

    Raises:
        HTTPException: 404 if environment not found
    """
    db_environment = _get_or_404(db, environment_id)

    update_data = environment_data.model_dump(exclude_unset=True)

    if update_data.get("is_active") is True:
        _deactivate_others(db, environment_id)

    for field, value in update_data.items():
        setattr(db_environment, field, value)

    db.commit()
    db.refresh(db_environment)
    return db_environment


@router.delete("/{environment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_environment(environment_id: int, db: Session = Depends(get_db)):
    """
    Delete an environment by ID, along with its variables.

    Raises:
        HTTPException: 404 if environment not found
    """
    db_environment = _get_or_404(db, environment_id)
    db.delete(db_environment)
    db.commit()
    return None


@router.post("/{environment_id}/activate", response_model=EnvironmentWithVariables)
def activate_environment(environment_id: int, db: Session = Depends(get_db)):
    """
    Set an environment as the active environment.

    Only one environment can be active at a time.

    Raises:
        HTTPException: 404 if environment not found
    """
    db_environment = _get_or_404(db, environment_id)
    _deactivate_others(db, environment_id)
    db_environment.is_active = True
    db.commit()
    db.refresh(db_environment)
    return db_environment


@router.post("/{environment_id}/deactivate", response_model=EnvironmentWithVariables)
def deactivate_environment(environment_id: int, db: Session = Depends(get_db)):
    """Clear the active flag, leaving no environment active if it was set."""
    db_environment = _get_or_404(db, environment_id)
    db_environment.is_active = False
    db.commit()
    db.refresh(db_environment)
    return db_environment


# Variable endpoints

@router.post("/{environment_id}/variables", response_model=VariableResponse, status_code=status.HTTP_201_CREATED)
def add_variable(
    environment_id: int,
    variable_data: VariableCreate,
    db: Session = Depends(get_db)
):
    """
    Append a variable to an environment.

    Duplicate keys are allowed; the last one wins at resolution time.

    Raises:
        HTTPException: 404 if environment not found
    """
    _get_or_404(db, environment_id)

    db_variable = Variable(
        environment_id=environment_id,
        key=variable_data.key,
        value=variable_data.value,
    )
    db.add(db_variable)
    db.commit()
    db.refresh(db_variable)
    return db_variable


@router.put("/variables/{variable_id}", response_model=VariableResponse)
def update_variable(
    variable_id: int,
    variable_data: VariableUpdate,
    db: Session = Depends(get_db)
):
    """
    Update an existing variable.

    Raises:
        HTTPException: 404 if variable not found
    """
    db_variable = db.query(Variable).filter(Variable.id == variable_id).first()
    if db_variable is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Variable with id {variable_id} not found"
        )

    update_data = variable_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_variable, field, value)

    db.commit()
    db.refresh(db_variable)
    return db_variable


@router.delete("/variables/{variable_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_variable(variable_id: int, db: Session = Depends(get_db)):
    """
    Delete a variable by ID.

    Raises:
        HTTPException: 404 if variable not found
    """
    db_variable = db.query(Variable).filter(Variable.id == variable_id).first()
    if db_variable is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Variable with id {variable_id} not found"
        )

    db.delete(db_variable)
    db.commit()
    return None
