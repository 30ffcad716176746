from .user import User
from .category import Category
from .comment import TaskComment
from .task import Task, TaskStatus, TaskPriority
