"""
Service-layer errors.

Every error carries a machine-readable code, a user-facing (Chinese) message and
the HTTP status the API layer answers with. main.py registers one handler that
renders them as {"detail": {"code": ..., "message": ...}}.
"""


class ServiceError(Exception):
    status_code = 400
    code = "BAD_REQUEST"
    message = "请求无效"

    def __init__(self, message: str | None = None, *, code: str | None = None, status_code: int | None = None):
        if message is not None:
            self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_detail(self) -> dict:
        return {"code": self.code, "message": self.message}


# ----- input validation (400) -----
class ValidationFailed(ServiceError):
    status_code = 400


# ----- authorization (403) -----
class AdminForbidden(ServiceError):
    status_code = 403
    code = "ADMIN_FORBIDDEN"
    message = "无权操作"


# ----- not found (404) -----
class OrderNotFound(ServiceError):
    status_code = 404
    code = "ORDER_NOT_FOUND"
    message = "订单不存在"


class CodeInvalid(ServiceError):
    status_code = 404
    code = "CODE_INVALID"
    message = "兑换码无效"


# ----- business rules (400) -----
class OrderAlreadyPaid(ServiceError):
    code = "ORDER_ALREADY_PAID"
    message = "订单已完成"


class OrderNotPending(ServiceError):
    code = "ORDER_NOT_PENDING"
    message = "只能取消待支付的订单"


class CodeUsed(ServiceError):
    code = "CODE_USED"
    message = "此兑换码已被使用"


class CodeExpired(ServiceError):
    code = "CODE_EXPIRED"
    message = "此兑换码已过期"


# ----- downstream / configuration (500) -----
class ServerConfigError(ServiceError):
    status_code = 500
    code = "SERVER_CONFIG_ERROR"
    message = "套餐配置错误，请联系客服"


class StoreWriteFailed(ServiceError):
    status_code = 500
    code = "ORDER_UPDATE_FAILED"
    message = "更新订单失败"


class SubscriptionCreateFailed(ServiceError):
    status_code = 500
    code = "SUBSCRIPTION_CREATE_FAILED"
    message = "创建订阅失败，请重试"


class SubscriptionNotFound(ServiceError):
    status_code = 404
    code = "SUBSCRIPTION_NOT_FOUND"
    message = "订阅不存在"
