"""
内容审核 API 路由

/moderation 与 /moderation/action 共用 services.moderation 中同一张状态转换表。
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from planeta.core.config import settings
from planeta.core.database import get_db
from planeta.core.deps import require_moderator
from planeta.schemas.common import ResponseModel
from planeta.schemas.moderation import ModerationRequest
from planeta.services.moderation import (
    STATUS_APPROVED, STATUS_PENDING, STATUS_REJECTED, apply_action, queue_bucket,
)


router = APIRouter(prefix="/moderation", tags=["moderacion"], dependencies=[Depends(require_moderator)])


def _action_response(request: ModerationRequest, db: Session) -> ResponseModel:
    result = apply_action(db, request.item_id, request.action, request.type)
    return ResponseModel(
        code=200,
        msg=result.message,
        data={
            "action": result.action,
            "itemId": result.item.id,
            "kind": result.kind,
            "status": result.status,
        }
    )


@router.get("", response_model=ResponseModel)
def get_pending(db: Session = Depends(get_db)):
    """待审核内容 (所有类型)"""
    pending = queue_bucket(db, STATUS_PENDING)
    return ResponseModel(code=200, data={"pending": pending, "total": len(pending)})


@router.post("", response_model=ResponseModel)
def moderate(request: ModerationRequest, db: Session = Depends(get_db)):
    """通过 / 拒绝 / 删除"""
    return _action_response(request, db)


@router.get("/all", response_model=ResponseModel)
def get_all(db: Session = Depends(get_db)):
    """审核面板: 待审核全部 + 最近通过 / 拒绝各最多 MODERATION_BUCKET_LIMIT 条"""
    limit = settings.MODERATION_BUCKET_LIMIT
    pending = queue_bucket(db, STATUS_PENDING)
    approved = queue_bucket(db, STATUS_APPROVED, limit)
    rejected = queue_bucket(db, STATUS_REJECTED, limit)
    content = pending + approved + rejected
    return ResponseModel(
        code=200,
        data={
            "content": content,
            "total": len(content),
            "pending": len(pending),
            "approved": len(approved),
            "rejected": len(rejected),
        }
    )


@router.post("/action", response_model=ResponseModel)
def moderation_action(request: ModerationRequest, db: Session = Depends(get_db)):
    return _action_response(request, db)
