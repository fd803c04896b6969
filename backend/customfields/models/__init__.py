"""Entity models exchanged with the definition and task stores."""

from customfields.models.custom_fields import CustomFieldDefinition
from customfields.models.tasks import TaskRecord

__all__ = ["CustomFieldDefinition", "TaskRecord"]
