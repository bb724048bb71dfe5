from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ... import crud, schemas
from ...database.connection import get_db

router = APIRouter(prefix="/operators", tags=["operators"])


@router.get("/", response_model=List[schemas.OperatorRead])
def list_operators(active_only: bool = False, db: Session = Depends(get_db)):
    return crud.list_operators(db, active_only=active_only)


@router.post("/", response_model=schemas.OperatorRead)
def create_operator(operator: schemas.OperatorCreate, db: Session = Depends(get_db)):
    if not operator.name.strip():
        raise HTTPException(status_code=422, detail="Operator name is required")
    if crud.get_operator_by_name(db, operator.name.strip()):
        raise HTTPException(status_code=409, detail="Operator already exists")
    return crud.create_operator(db, operator)


@router.patch("/{operator_id}", response_model=schemas.OperatorRead)
def update_operator(operator_id: int, operator: schemas.OperatorUpdate, db: Session = Depends(get_db)):
    db_operator = crud.update_operator(db, operator_id, operator)
    if not db_operator:
        raise HTTPException(status_code=404, detail="Operator not found")
    return db_operator
