import os
from dotenv import load_dotenv

# Загрузка переменных окружения из .env файла
load_dotenv()

# Настройки базы данных
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///dependency_graph.db")

# Длительность задачи хранится в часах, расчет ведется в днях
HOURS_PER_DAY = float(os.getenv("HOURS_PER_DAY", "8"))

# Ограничения размера графа проекта
MAX_GRAPH_TASKS = int(os.getenv("MAX_GRAPH_TASKS", "1000"))
MAX_GRAPH_DEPENDENCIES = int(os.getenv("MAX_GRAPH_DEPENDENCIES", "5000"))

# Настройки логирования
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE")
