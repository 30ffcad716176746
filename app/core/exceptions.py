# app/core/exceptions.py

class BaseAppException(Exception):
    """Базовый класс для всех кастомных исключений приложения."""
    def __init__(self, message: str = "App exception"):
        super().__init__(message)
        self.message = message

# ==== Валидация/создание ====

class ValidationError(BaseAppException):
    """Общая ошибка валидации."""
    def __init__(self, message: str = "Validation error", errors: list | None = None):
        super().__init__(message)
        self.errors = errors or []

class TaskValidationError(ValidationError):
    """Ошибка валидации задачи."""
    def __init__(self, message: str = "Task validation error", errors: list | None = None):
        super().__init__(message, errors)

# ==== NotFound ====

class NotFoundError(BaseAppException):
    """Ошибка отсутствия ресурса."""
    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)

class TaskNotFound(NotFoundError):
    """Ошибка: задача не найдена."""
    def __init__(self, message: str = "Task not found"):
        super().__init__(message)

# ==== Авторизация ====

class AuthError(BaseAppException):
    """Ошибка аутентификации или авторизации."""
    def __init__(self, message: str = "Authentication or authorization error"):
        super().__init__(message)

class ForbiddenError(AuthError):
    """Пользователь аутентифицирован, но действие ему запрещено."""
    def __init__(self, message: str = "Not authorized"):
        super().__init__(message)

class TaskForbidden(ForbiddenError):
    """Ошибка: нет прав на задачу."""
    def __init__(self, message: str = "Not authorized to access this task"):
        super().__init__(message)

# ==== Хранилище ====

class StoreError(BaseAppException):
    """Сбой базы данных / инфраструктуры (неожиданная ошибка)."""
    def __init__(self, message: str = "Database error"):
        super().__init__(message)
