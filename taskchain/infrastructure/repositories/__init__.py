from .actors import ActorRepository
from .notifications import NotificationRepository
from .tasks import TaskRepository
from .unit_of_work import UnitOfWork

__all__ = ["ActorRepository", "NotificationRepository", "TaskRepository", "UnitOfWork"]
