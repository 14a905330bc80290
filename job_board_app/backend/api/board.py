import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import schemas
from ..models.db.database import get_db
from ..services.board_reconciler import BoardReconciler, UnknownJobError
from ..services.job_store import SqlJobStore
from ..utils.api_helpers import handle_service_error
from .auth import get_current_active_user

logger = logging.getLogger(__name__)

router = APIRouter()


async def load_board(db: Session, owner_id: int) -> BoardReconciler:
    reconciler = BoardReconciler(SqlJobStore(db), owner_id=owner_id)
    notification = await reconciler.refresh()
    if notification is not None:
        raise handle_service_error(RuntimeError(notification.message), "Board")
    return reconciler


@router.get("", response_model=schemas.Board)
async def read_board(
    db: Session = Depends(get_db),
    current_user: schemas.User = Depends(get_current_active_user)
):
    """
    The current user's jobs grouped into the five board columns.
    """
    reconciler = await load_board(db, current_user.id)
    return {"columns": reconciler.partition_by_status()}


@router.post("/move", response_model=schemas.BoardMoveResult)
async def move_job(
    move: schemas.BoardMoveRequest,
    db: Session = Depends(get_db),
    current_user: schemas.User = Depends(get_current_active_user)
):
    """
    Move a job to another column.

    A rejected store write is not an HTTP error: the job comes back with its
    previous status and the notification explains what happened.
    """
    reconciler = await load_board(db, current_user.id)
    try:
        notification = await reconciler.apply_move(move.job_id, move.status)
        job = reconciler.get_job(move.job_id)
    except UnknownJobError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    return {"job": job, "notification": notification}
