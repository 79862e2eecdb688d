"""
Модуль для работы с импортом задач и зависимостей из CSV-файлов
"""
import csv
import io
import logging

from database.operations import create_new_project, add_project_task, add_task_dependency
from planning.models import Dependency, DependencyType, Task
from planning.validation import validate_dependency

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ['title', 'estimated_hours']

TYPE_SUFFIXES = {
    'FS': DependencyType.FINISH_TO_START,
    'SS': DependencyType.START_TO_START,
    'FF': DependencyType.FINISH_TO_FINISH,
    'SF': DependencyType.START_TO_FINISH,
}


def parse_predecessor(value):
    """
    Разбирает ссылку на предшественника вида "Название" или "Название:SS".

    Returns:
        (название, DependencyType)
    """
    value = value.strip()
    if ':' in value:
        name, suffix = value.rsplit(':', 1)
        dependency_type = TYPE_SUFFIXES.get(suffix.strip().upper())
        if dependency_type:
            return name.strip(), dependency_type
    return value, DependencyType.FINISH_TO_START


def parse_csv_tasks(csv_data):
    """
    Парсит CSV-файл с задачами.

    Формат CSV:
    title,estimated_hours,priority,start_date,due_date,predecessors

    Где predecessors - список названий задач через запятую, у каждого
    можно указать тип связи суффиксом :FS, :SS, :FF или :SF.

    Args:
        csv_data: Содержимое CSV-файла (строка или файловый объект)

    Returns:
        Список задач или пустой список при ошибке
    """
    tasks = []

    # Если данные в виде строки, преобразуем в StringIO
    if isinstance(csv_data, str):
        csv_data = io.StringIO(csv_data)

    reader = csv.DictReader(csv_data)

    for row in reader:
        # Проверяем наличие обязательных полей
        if not all(field in row for field in REQUIRED_FIELDS):
            logger.error("В CSV отсутствуют обязательные поля")
            return []

        try:
            estimated_hours = float(row['estimated_hours']) if row['estimated_hours'] else None

            task = {
                'title': row['title'].strip(),
                'estimated_hours': estimated_hours,
                'priority': (row.get('priority') or 'medium').strip().lower(),
                'start_date': (row.get('start_date') or '').strip() or None,
                'due_date': (row.get('due_date') or '').strip() or None,
                'predecessors': []
            }

            # Парсим предшественников, если они указаны
            if row.get('predecessors'):
                task['predecessors'] = [
                    parse_predecessor(pred) for pred in row['predecessors'].split(',') if pred.strip()
                ]

            tasks.append(task)

        except ValueError as e:
            logger.error(f"Некорректные числовые значения для задачи: {row['title']}: {str(e)}")
            return []

    return tasks


def validate_csv_format(csv_content):
    """
    Проверяет корректность формата CSV-файла.

    Args:
        csv_content: Содержимое CSV-файла

    Returns:
        (bool, str): Результат проверки и сообщение об ошибке
    """
    if isinstance(csv_content, str):
        csv_data = io.StringIO(csv_content)
    else:
        csv_data = csv_content
        csv_data.seek(0)

    reader = csv.reader(csv_data)
    header = next(reader, None)

    if not header:
        return False, "CSV-файл пуст"

    missing_fields = [field for field in REQUIRED_FIELDS if field not in header]
    if missing_fields:
        return False, f"В CSV отсутствуют обязательные поля: {', '.join(missing_fields)}"

    first_row = next(reader, None)
    if not first_row:
        return False, "CSV-файл не содержит данных"

    return True, "CSV-файл корректен"


def build_snapshot(rows):
    """
    Builds engine tasks and dependencies from parsed CSV rows.

    Each dependency is validated against the ones accepted before it, so
    dangling names, self-loops, duplicates and cycles end up in the error
    list instead of the graph.

    Args:
        rows: Result of parse_csv_tasks

    Returns:
        (tasks, dependencies, errors)
    """
    tasks = []
    dependencies = []
    errors = []
    task_ids = {}
    accepted_rows = []

    for i, row in enumerate(rows, start=1):
        if row['title'] in task_ids:
            errors.append(f"Duplicate task title: {row['title']}")
            continue
        try:
            task = Task(
                id=f"task-{i}",
                title=row['title'],
                priority=row['priority'],
                start_date=row['start_date'],
                due_date=row['due_date'],
                estimated_hours=row['estimated_hours']
            )
        except ValueError as e:
            errors.append(f"{row['title']}: {str(e)}")
            continue
        task_ids[task.title] = task.id
        tasks.append(task)
        accepted_rows.append(row)

    # Связи строим только для принятых строк, предшественники ищутся по названию
    for row in accepted_rows:
        to_task_id = task_ids[row['title']]
        for predecessor_name, dependency_type in row['predecessors']:
            from_task_id = task_ids.get(predecessor_name)
            if from_task_id is None:
                errors.append(
                    f"{predecessor_name} -> {row['title']}: "
                    f"Dangling reference: task '{predecessor_name}' does not exist"
                )
                continue
            result = validate_dependency(tasks, dependencies, from_task_id, to_task_id)
            if not result.valid:
                errors.append(f"{predecessor_name} -> {row['title']}: {result.message}")
                continue
            dependencies.append(Dependency(
                id=f"dep-{len(dependencies) + 1}",
                from_task_id=from_task_id,
                to_task_id=to_task_id,
                type=dependency_type
            ))

    for error in errors:
        logger.warning(f"Ошибка импорта: {error}")

    return tasks, dependencies, errors


def create_project_from_csv(project_name, csv_data):
    """
    Creates a project based on CSV file data.

    Args:
        project_name: Name of the new project
        csv_data: CSV file content

    Returns:
        ID of the created project or None on error
    """
    rows = parse_csv_tasks(csv_data)

    if not rows:
        logger.error("Failed to parse tasks from CSV")
        return None

    tasks, dependencies, errors = build_snapshot(rows)

    start_dates = [task.start_date for task in tasks if task.start_date]
    project_id = create_new_project(project_name, min(start_dates) if start_dates else None)

    # Map snapshot ids to database ids
    db_ids = {}
    for task in tasks:
        db_ids[task.id] = add_project_task(
            project_id,
            task.title,
            estimated_hours=task.estimated_hours,
            priority=task.priority.value,
            start_date=task.start_date,
            due_date=task.due_date
        )

    for dep in dependencies:
        add_task_dependency(project_id, db_ids[dep.from_task_id], db_ids[dep.to_task_id], dep.type.value)

    logger.info(f"Created project from CSV: {project_name} (ID: {project_id}), "
                f"{len(tasks)} tasks, {len(dependencies)} dependencies, {len(errors)} errors")
    return project_id


def generate_sample_csv():
    """
    Генерирует пример CSV-файла с задачами.

    Returns:
        Строка с примером CSV
    """
    sample_data = """title,estimated_hours,priority,start_date,due_date,predecessors
Сбор требований,16,high,2025-03-03,2025-03-05,
Проектирование,24,high,,2025-03-10,Сбор требований
Разработка API,40,urgent,,2025-03-20,Проектирование
Разработка интерфейса,32,medium,,2025-03-21,Проектирование:SS
Тестирование,16,high,,2025-03-25,"Разработка API,Разработка интерфейса:FF"
Документация,8,low,,,Проектирование
"""
    return sample_data
