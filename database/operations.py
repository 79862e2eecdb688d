from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from database.models import Base, Project, Task, TaskDependency
from config import DATABASE_URL
from logger import logger
from planning import models as graph
from planning.engine import DependencyGraphEngine
from planning.network import schedule_dates
from planning.validation import find_available_dependencies

# Создаем соединение с БД
engine = create_engine(DATABASE_URL)
Session = sessionmaker(bind=engine)


def init_db():
    """Инициализирует базу данных."""
    logger.info(f"Инициализация базы данных с URL: {DATABASE_URL}")
    try:
        Base.metadata.create_all(engine)
        logger.info("База данных успешно инициализирована")

    except Exception as e:
        logger.error(f"Ошибка при инициализации базы данных: {str(e)}")
        raise


@contextmanager
def session_scope():
    """
    Контекстный менеджер для работы с сессиями SQLAlchemy.
    Автоматически выполняет commit при успешном завершении
    и rollback при возникновении исключения.
    """
    session = Session()
    try:
        yield session
        session.commit()
    except Exception as e:
        session.rollback()
        logger.error(f"Ошибка при работе с БД: {str(e)}")
        raise
    finally:
        session.close()


def to_graph_task(task):
    """Преобразует строку БД в неизменяемую задачу движка."""
    return graph.Task(
        id=task.id,
        title=task.title,
        status=task.status,
        priority=task.priority,
        project_id=task.project_id,
        start_date=task.start_date,
        due_date=task.due_date,
        estimated_hours=task.estimated_hours
    )


def to_graph_dependency(dependency):
    """Преобразует строку БД в зависимость движка."""
    return graph.Dependency(
        id=dependency.id,
        from_task_id=dependency.from_task_id,
        to_task_id=dependency.to_task_id,
        type=dependency.type
    )


def load_snapshot(session, project_id):
    tasks = session.query(Task).filter(Task.project_id == project_id).order_by(Task.id).all()
    dependencies = (
        session.query(TaskDependency)
        .filter(TaskDependency.project_id == project_id)
        .order_by(TaskDependency.id)
        .all()
    )
    return [to_graph_task(t) for t in tasks], [to_graph_dependency(d) for d in dependencies]


def create_new_project(name, start_date=None):
    """
    Создает новый проект в БД.

    Args:
        name: Название проекта
        start_date: Дата начала проекта

    Returns:
        ID созданного проекта
    """
    with session_scope() as session:
        project = Project(name=name, start_date=start_date)
        session.add(project)
        session.flush()
        return project.id


def add_project_task(project_id, title, estimated_hours=None, priority='medium', status='todo',
                     start_date=None, due_date=None):
    """
    Добавляет задачу в проект.

    Args:
        project_id: ID проекта
        title: Название задачи
        estimated_hours: Оценка трудоемкости в часах
        priority: Приоритет (low, medium, high, urgent)
        status: Статус задачи
        start_date: Дата начала
        due_date: Срок выполнения

    Returns:
        ID созданной задачи
    """
    # Проверяем значения через модель движка до записи в БД
    checked = graph.Task(
        id=None, title=title, status=status, priority=priority,
        start_date=start_date, due_date=due_date, estimated_hours=estimated_hours
    )

    with session_scope() as session:
        task = Task(
            project_id=project_id,
            title=title,
            status=status,
            priority=checked.priority.value,
            start_date=checked.start_date,
            due_date=checked.due_date,
            estimated_hours=estimated_hours
        )
        session.add(task)
        session.flush()
        return task.id


def add_task_dependency(project_id, from_task_id, to_task_id, dependency_type='finish-to-start'):
    """
    Добавляет зависимость между задачами после проверки графа.

    Args:
        project_id: ID проекта
        from_task_id: ID предшествующей задачи
        to_task_id: ID зависимой задачи
        dependency_type: Тип связи

    Returns:
        (ID созданной зависимости или None, ValidationResult)
    """
    dependency_type = graph.DependencyType(dependency_type)

    with session_scope() as session:
        tasks, dependencies = load_snapshot(session, project_id)
        result = DependencyGraphEngine().validate_dependency(tasks, dependencies, from_task_id, to_task_id)
        if not result.valid:
            logger.info(f"Зависимость {from_task_id} -> {to_task_id} отклонена: {result.message}")
            return None, result

        dependency = TaskDependency(
            project_id=project_id,
            from_task_id=from_task_id,
            to_task_id=to_task_id,
            type=dependency_type.value
        )
        session.add(dependency)
        session.flush()
        logger.info(f"Добавлена зависимость {from_task_id} -> {to_task_id} ({dependency_type.value})")
        return dependency.id, result


def remove_task_dependency(dependency_id):
    """
    Удаляет зависимость.

    Returns:
        True, если зависимость была удалена
    """
    with session_scope() as session:
        dependency = session.get(TaskDependency, dependency_id)
        if not dependency:
            logger.warning(f"Зависимость {dependency_id} не найдена")
            return False
        session.delete(dependency)
        return True


def get_project_data(project_id):
    """
    Gets project snapshot from the database.

    Args:
        project_id: Project ID

    Returns:
        Dictionary with id, name, start_date and engine tasks/dependencies, or None
    """
    with session_scope() as session:
        project = session.get(Project, project_id)

        if not project:
            return None

        tasks, dependencies = load_snapshot(session, project_id)
        logger.debug(f"Database tasks for project {project_id}: {len(tasks)}")

        return {
            'id': project.id,
            'name': project.name,
            'start_date': project.start_date,
            'tasks': tasks,
            'dependencies': dependencies
        }


def set_project_start_date_in_db(project_id, start_date):
    """Устанавливает дату начала проекта."""
    with session_scope() as session:
        project = session.get(Project, project_id)
        if not project:
            return False
        project.start_date = start_date
        return True


def get_project_plan(project_id, hours_per_day=None):
    """
    Рассчитывает план проекта по данным из БД.

    Дата начала проекта используется как точка отсчета сетевой модели
    и для перевода сроков в календарные даты.

    Args:
        project_id: ID проекта
        hours_per_day: Количество рабочих часов в дне

    Returns:
        Словарь с analysis, sequence и dates или None, если проект не найден
    """
    data = get_project_data(project_id)
    if data is None:
        return None

    graph_engine = DependencyGraphEngine(hours_per_day=hours_per_day)
    analysis = graph_engine.calculate_critical_path(
        data['tasks'], data['dependencies'], project_start=data['start_date']
    )
    sequence = graph_engine.suggest_optimized_sequence(data['tasks'], data['dependencies'])

    dates = schedule_dates(analysis, data['start_date']) if data['start_date'] else {}
    logger.info(f"Рассчитан план проекта {project_id}: {analysis.critical_path_duration} дней")

    return {
        'analysis': analysis,
        'sequence': sequence,
        'dates': dates
    }


def get_task_dependencies(task_id):
    """Зависимости, которых ожидает задача (ее предшественники)."""
    with session_scope() as session:
        rows = (
            session.query(TaskDependency)
            .filter(TaskDependency.to_task_id == task_id)
            .order_by(TaskDependency.id)
            .all()
        )
        return [to_graph_dependency(row) for row in rows]


def get_task_dependents(task_id):
    """Зависимости, которые ожидают задачу (ее последователи)."""
    with session_scope() as session:
        rows = (
            session.query(TaskDependency)
            .filter(TaskDependency.from_task_id == task_id)
            .order_by(TaskDependency.id)
            .all()
        )
        return [to_graph_dependency(row) for row in rows]


def get_available_dependencies(task_id):
    """
    Задачи проекта, которые можно сделать предшественниками задачи
    без создания цикла или дубликата.
    """
    with session_scope() as session:
        task = session.get(Task, task_id)
        if not task:
            return []
        tasks, dependencies = load_snapshot(session, task.project_id)
        return find_available_dependencies(tasks, dependencies, task_id)
