from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import TypeAdapter
from sqlalchemy.orm import Session

from mileage.api.deps import get_db
from mileage.api.routes.meetups import get_meetup_or_404
from mileage.core.auth import get_current_user
from mileage.core.config import settings
from mileage.crud import meetup_crud
from mileage.crud.pagination import paginate
from mileage.models.comment import Comment, CommentableKind
from mileage.models.user import User
from mileage.schemas.comment import CommentCreateRequest, CommentPage, CommentPublic

router = APIRouter(prefix="/meetups/{meetup_id}/comments", tags=["comments"])

_comment_list = TypeAdapter(list[CommentPublic])


def _get_own_comment(db: Session, meetup_id: int, comment_id: int, current_user: User) -> Comment:
    comment = db.get(Comment, comment_id)
    if (
        not comment
        or comment.commentable_type != CommentableKind.MEETUP.value
        or comment.commentable_id != meetup_id
    ):
        raise HTTPException(status_code=404, detail="Comment not found")
    if comment.user_id != current_user.id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return comment


@router.get("", response_model=CommentPage)
def list_comments(
    meetup_id: int,
    page: int = Query(1),
    db: Session = Depends(get_db),
):
    get_meetup_or_404(db, meetup_id)

    comments, total_pages, current_page = paginate(
        db, meetup_crud.comments_stmt(meetup_id), page, settings.COMMENTS_PER_PAGE
    )
    items = [meetup_crud.comment_public(db, c) for c in comments]
    return CommentPage(
        comments=_comment_list.dump_json(items).decode(),
        total_pages=total_pages,
        current_page=current_page,
    )


@router.post("", response_model=CommentPublic, status_code=201)
def create_comment(
    meetup_id: int,
    payload: CommentCreateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    meetup = get_meetup_or_404(db, meetup_id)

    comment = Comment(
        user_id=current_user.id,
        commentable_type=CommentableKind.MEETUP.value,
        commentable_id=meetup.id,
        content=payload.comment.content,
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)

    return meetup_crud.comment_public(db, comment)


@router.patch("/{comment_id}", response_model=CommentPublic)
def update_comment(
    meetup_id: int,
    comment_id: int,
    payload: CommentCreateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    comment = _get_own_comment(db, meetup_id, comment_id, current_user)

    comment.content = payload.comment.content
    db.commit()
    db.refresh(comment)

    return meetup_crud.comment_public(db, comment)


@router.delete("/{comment_id}", status_code=204)
def delete_comment(
    meetup_id: int,
    comment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    comment = _get_own_comment(db, meetup_id, comment_id, current_user)

    db.delete(comment)
    db.commit()
