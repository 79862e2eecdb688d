"""
Таблица ограничений по типам зависимостей.

Для каждого типа связи pred -> succ задаются две функции:
    forward(pred, succ_duration) -> нижняя граница раннего начала последователя
    backward(succ, pred_duration) -> верхняя граница позднего окончания предшественника

pred и succ - словари с ключами early_start, early_finish, late_start, late_finish.
Новый тип связи добавляется одной строкой в CONSTRAINTS.
"""
from collections import namedtuple

from planning.models import DependencyType

Constraint = namedtuple('Constraint', ['forward', 'backward'])


CONSTRAINTS = {
    DependencyType.FINISH_TO_START: Constraint(
        forward=lambda pred, succ_duration: pred['early_finish'],
        backward=lambda succ, pred_duration: succ['late_start'],
    ),
    DependencyType.START_TO_START: Constraint(
        forward=lambda pred, succ_duration: pred['early_start'],
        backward=lambda succ, pred_duration: succ['late_start'] + pred_duration,
    ),
    DependencyType.FINISH_TO_FINISH: Constraint(
        forward=lambda pred, succ_duration: pred['early_finish'] - succ_duration,
        backward=lambda succ, pred_duration: succ['late_finish'],
    ),
    DependencyType.START_TO_FINISH: Constraint(
        forward=lambda pred, succ_duration: pred['early_start'] - succ_duration,
        backward=lambda succ, pred_duration: succ['late_finish'] + pred_duration,
    ),
}


def earliest_start_bound(dependency_type, pred, succ_duration):
    """Ограничение на ранний срок начала последователя."""
    return CONSTRAINTS[dependency_type].forward(pred, succ_duration)


def latest_finish_bound(dependency_type, succ, pred_duration):
    """Ограничение на поздний срок окончания предшественника."""
    return CONSTRAINTS[dependency_type].backward(succ, pred_duration)
