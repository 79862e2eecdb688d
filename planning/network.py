"""
Модуль для расчета параметров сетевой модели и определения критического пути
"""
from collections import deque
from datetime import timedelta

from config import HOURS_PER_DAY
from logger import logger
from planning.constraints import earliest_start_bound, latest_finish_bound
from planning.errors import CycleDetectedError, DependencyGraphError
from planning.models import CriticalPathResult, TimingResult

# Допуск при сравнении резерва времени с нулем
EPSILON = 1e-9


def task_duration(task, hours_per_day=HOURS_PER_DAY):
    """
    Рассчитывает длительность задачи в днях.

    Args:
        task: Задача
        hours_per_day: Количество рабочих часов в дне

    Returns:
        Длительность в днях
    """
    if task.estimated_hours is not None:
        return task.estimated_hours / hours_per_day

    # Без оценки в часах длительность берется из дат задачи
    if task.start_date and task.due_date:
        return max(0, (task.due_date - task.start_date).days)

    return 0


def calculate_critical_path(tasks, dependencies, hours_per_day=HOURS_PER_DAY, project_start=None):
    """
    Рассчитывает критический путь проекта (метод CPM).

    Args:
        tasks: Список задач проекта
        dependencies: Список зависимостей между задачами
        hours_per_day: Количество рабочих часов в дне
        project_start: Дата начала проекта (по умолчанию самая ранняя дата начала задач)

    Returns:
        CriticalPathResult с параметрами сетевой модели
    """
    if not tasks:
        logger.debug("Нет задач для расчета критического пути")
        return CriticalPathResult(critical_path_duration=0)

    # Создаем сетевую модель
    network = create_network_model(tasks, dependencies, hours_per_day, project_start)

    # Сортируем задачи в топологическом порядке
    order = topological_sort(network)

    # Рассчитываем ранние сроки начала и окончания
    calculate_early_times(network, order)

    # Рассчитываем поздние сроки начала и окончания
    project_duration = calculate_late_times(network, order)

    # Рассчитываем резервы времени
    calculate_reserves(network)

    # Определяем критический путь
    critical_path = identify_critical_path(network, order)

    timings = {}
    for task in tasks:
        node = network[task.id]
        timings[task.id] = TimingResult(
            task_id=task.id,
            duration=node['duration'],
            earliest_start=node['early_start'],
            earliest_finish=node['early_finish'],
            latest_start=node['late_start'],
            latest_finish=node['late_finish'],
            slack=node['reserve'],
            is_critical=node['is_critical']
        )

    slack_nodes = [network[task.id] for task in tasks if not network[task.id]['is_critical']]
    slack_nodes.sort(key=lambda x: (x['reserve'], x['early_start'], x['index']))

    logger.info(f"Рассчитана сетевая модель: {len(network)} задач, проект: {project_duration} дней")
    logger.info(f"Критический путь: {[node['task'].title for node in critical_path]}")

    return CriticalPathResult(
        critical_path_duration=project_duration,
        critical_tasks=[node['task'] for node in critical_path],
        timings=timings,
        slack_tasks=[node['task'] for node in slack_nodes],
        order=list(order)
    )


def create_network_model(tasks, dependencies, hours_per_day=HOURS_PER_DAY, project_start=None):
    """
    Создает сетевую модель на основе задач и зависимостей.

    Args:
        tasks: Список задач
        dependencies: Список зависимостей
        hours_per_day: Количество рабочих часов в дне
        project_start: Дата начала проекта

    Returns:
        Словарь id -> узел сетевой модели
    """
    if project_start is None:
        start_dates = [task.start_date for task in tasks if task.start_date]
        project_start = min(start_dates) if start_dates else None

    network = {}
    for index, task in enumerate(tasks):
        if task.id in network:
            raise DependencyGraphError(f"Duplicate task id: {task.id}")

        # Смещение даты начала относительно начала проекта в днях
        offset = 0
        if project_start and task.start_date:
            offset = (task.start_date - project_start).days

        network[task.id] = {
            'id': task.id,
            'task': task,
            'index': index,
            'duration': task_duration(task, hours_per_day),
            'offset': offset,
            'predecessors': [],
            'successors': [],
            'early_start': 0,
            'early_finish': 0,
            'late_start': 0,
            'late_finish': 0,
            'is_critical': False,
            'reserve': 0
        }

    # Заполняем связи, пропуская ссылки на несуществующие задачи
    for dep in dependencies:
        if dep.from_task_id not in network or dep.to_task_id not in network:
            logger.warning(f"Зависимость {dep.id} ссылается на несуществующую задачу, пропускаем")
            continue
        network[dep.from_task_id]['successors'].append((dep.to_task_id, dep.type))
        network[dep.to_task_id]['predecessors'].append((dep.from_task_id, dep.type))

    logger.debug(f"Создана сетевая модель: {len(network)} задач")
    return network


def topological_sort(network):
    """
    Сортирует задачи в топологическом порядке (алгоритм Кана).

    Args:
        network: Сетевая модель

    Returns:
        Список id задач в топологическом порядке

    Raises:
        CycleDetectedError: если граф содержит цикл
    """
    # Считаем количество входящих связей для каждой задачи
    in_degree = {task_id: len(node['predecessors']) for task_id, node in network.items()}

    # Начинаем с задач без предшественников, сохраняя исходный порядок
    queue = deque(task_id for task_id, degree in in_degree.items() if degree == 0)
    order = []

    while queue:
        task_id = queue.popleft()
        order.append(task_id)
        for successor_id, _ in network[task_id]['successors']:
            in_degree[successor_id] -= 1
            if in_degree[successor_id] == 0:
                queue.append(successor_id)

    if len(order) != len(network):
        cycle_ids = [task_id for task_id, degree in in_degree.items() if degree > 0]
        cycle_names = [network[task_id]['task'].title for task_id in cycle_ids]
        logger.error(f"Обнаружена циклическая зависимость: {' -> '.join(cycle_names)}")
        raise CycleDetectedError(cycle_ids)

    return order


def calculate_early_times(network, order):
    """
    Рассчитывает ранние сроки начала и окончания для всех работ.

    Args:
        network: Сетевая модель
        order: Топологический порядок задач
    """
    for task_id in order:
        task = network[task_id]

        if not task['predecessors']:
            # Задача без предшественников начинается не раньше своей даты начала
            task['early_start'] = max(0, task['offset'])
        else:
            # Иначе ранний срок начала = максимум ограничений от предшественников
            bounds = [
                earliest_start_bound(dep_type, network[pred_id], task['duration'])
                for pred_id, dep_type in task['predecessors']
            ]
            task['early_start'] = max(0, max(bounds))

        # Ранний срок окончания = ранний срок начала + длительность
        task['early_finish'] = task['early_start'] + task['duration']


def calculate_late_times(network, order):
    """
    Рассчитывает поздние сроки начала и окончания для всех работ.

    Args:
        network: Сетевая модель с ранними сроками
        order: Топологический порядок задач

    Returns:
        Длительность проекта
    """
    # Находим максимальный ранний срок окончания (длина всего проекта)
    project_duration = max((task['early_finish'] for task in network.values()), default=0)

    # Обрабатываем задачи в обратном порядке
    for task_id in reversed(order):
        task = network[task_id]

        # Для задач без последователей поздний срок окончания = длине проекта
        task['late_finish'] = project_duration
        if task['successors']:
            bounds = [
                latest_finish_bound(dep_type, network[succ_id], task['duration'])
                for succ_id, dep_type in task['successors']
            ]
            task['late_finish'] = min(project_duration, min(bounds))

        # Поздний срок начала = поздний срок окончания - длительность
        task['late_start'] = task['late_finish'] - task['duration']

    return project_duration


def calculate_reserves(network):
    """
    Рассчитывает резервы времени и отмечает критические работы.

    Args:
        network: Сетевая модель с рассчитанными сроками
    """
    for task in network.values():
        # Полный резерв времени = поздний срок начала - ранний срок начала
        reserve = task['late_start'] - task['early_start']
        if abs(reserve) <= EPSILON:
            reserve = 0
        task['reserve'] = reserve
        task['is_critical'] = reserve == 0


def identify_critical_path(network, order):
    """
    Определяет критический путь в сетевой модели.

    Args:
        network: Сетевая модель с рассчитанными параметрами
        order: Топологический порядок задач

    Returns:
        Список узлов критического пути в порядке выполнения
    """
    position = {task_id: i for i, task_id in enumerate(order)}
    critical_tasks = [task for task in network.values() if task['is_critical']]

    # Сортируем критические задачи по раннему сроку начала
    critical_tasks.sort(key=lambda x: (x['early_start'], x['early_finish'], position[x['id']]))
    return critical_tasks


def schedule_dates(result, project_start):
    """
    Переводит сроки сетевой модели в календарные даты без учета выходных дней.

    Args:
        result: CriticalPathResult
        project_start: Дата начала проекта

    Returns:
        Словарь id задачи -> словарь с датами
    """
    dates = {}
    for task_id, timing in result.timings.items():
        dates[task_id] = {
            'early_start_date': project_start + timedelta(days=timing.earliest_start),
            'early_finish_date': project_start + timedelta(days=timing.earliest_finish),
            'late_start_date': project_start + timedelta(days=timing.latest_start),
            'late_finish_date': project_start + timedelta(days=timing.latest_finish),
        }
    return dates
