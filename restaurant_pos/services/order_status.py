from ..db.orders import OrderStatus

# Допустимые переходы в строгом режиме. COMPLETED и CANCELLED конечные.
VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.IN_PROGRESS, OrderStatus.CANCELLED},
    OrderStatus.IN_PROGRESS: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}


class StatusTransitionError(ValueError):
    pass


def check_status_transition(current: OrderStatus, new: OrderStatus, strict: bool) -> None:
    """
    Проверяет смену статуса заказа.

    Без strict разрешён любой переход (ручная правка статуса с кассы).
    Повторная установка текущего статуса допустима всегда.
    """
    if current == new or not strict:
        return
    if new not in VALID_TRANSITIONS[current]:
        raise StatusTransitionError(f"Cannot transition from {current.value} to {new.value}")
