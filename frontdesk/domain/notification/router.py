"""Notification procedures"""

from ...rpc import ProcedureContext, ProcedureRouter
from ...schemas import IdInput, SuccessResponse
from .schemas import CountResponse, NotificationCreate, NotificationListInput, NotificationResponse
from .service import NotificationService

router = ProcedureRouter("notification")


def get_notification_service(ctx: ProcedureContext) -> NotificationService:
    return NotificationService(ctx.db, ctx.user_id, ctx.org_id)


@router.query("getAll", NotificationListInput)
def get_all(ctx: ProcedureContext, data: NotificationListInput):
    return [NotificationResponse.model_validate(n) for n in get_notification_service(ctx).get_all(data)]


@router.query("getUnreadCount")
def get_unread_count(ctx: ProcedureContext):
    return CountResponse(count=get_notification_service(ctx).get_unread_count())


@router.mutation("markAsRead", IdInput)
def mark_as_read(ctx: ProcedureContext, data: IdInput):
    return NotificationResponse.model_validate(get_notification_service(ctx).mark_as_read(data.id))


@router.mutation("markAllAsRead")
def mark_all_as_read(ctx: ProcedureContext):
    return CountResponse(count=get_notification_service(ctx).mark_all_as_read())


@router.mutation("delete", IdInput)
def delete(ctx: ProcedureContext, data: IdInput):
    get_notification_service(ctx).delete(data.id)
    return SuccessResponse(message="Notification deleted")


@router.mutation("deleteAllRead")
def delete_all_read(ctx: ProcedureContext):
    return CountResponse(count=get_notification_service(ctx).delete_all_read())


@router.mutation("create", NotificationCreate)
def create(ctx: ProcedureContext, data: NotificationCreate):
    return NotificationResponse.model_validate(get_notification_service(ctx).create(data))
