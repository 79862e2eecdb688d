from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, UniqueConstraint, Date as SQLAlchemyDate
from sqlalchemy.orm import declarative_base, relationship
from datetime import datetime

Base = declarative_base()


class Project(Base):
    """Модель проекта в БД."""
    __tablename__ = 'projects'

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.now)
    start_date = Column(SQLAlchemyDate, nullable=True)

    tasks = relationship("Task", back_populates="project")
    dependencies = relationship("TaskDependency", back_populates="project")

    def __repr__(self):
        return f"<Project(id={self.id}, name='{self.name}')>"


class Task(Base):
    """Модель задачи в БД."""
    __tablename__ = 'tasks'

    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey('projects.id'), nullable=False)
    title = Column(String, nullable=False)
    status = Column(String, nullable=False, default='todo')
    priority = Column(String, nullable=False, default='medium')  # low | medium | high | urgent
    start_date = Column(SQLAlchemyDate, nullable=True)
    due_date = Column(SQLAlchemyDate, nullable=True)
    estimated_hours = Column(Float, nullable=True)

    project = relationship("Project", back_populates="tasks")

    def __repr__(self):
        return f"<Task(id={self.id}, title='{self.title}', estimated_hours={self.estimated_hours})>"


class TaskDependency(Base):
    """Модель зависимости между задачами в БД: from_task -> to_task."""
    __tablename__ = 'task_dependencies'
    __table_args__ = (
        UniqueConstraint('from_task_id', 'to_task_id', name='uq_task_dependency_pair'),
    )

    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey('projects.id'), nullable=False)
    from_task_id = Column(Integer, ForeignKey('tasks.id'), nullable=False)
    to_task_id = Column(Integer, ForeignKey('tasks.id'), nullable=False)
    type = Column(String, nullable=False, default='finish-to-start')

    project = relationship("Project", back_populates="dependencies")
    from_task = relationship("Task", foreign_keys=[from_task_id])
    to_task = relationship("Task", foreign_keys=[to_task_id])

    def __repr__(self):
        return f"<TaskDependency(from_task_id={self.from_task_id}, to_task_id={self.to_task_id}, type='{self.type}')>"
