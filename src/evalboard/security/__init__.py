"""Security utilities -- input validation at the system boundary."""
from .validators import ValidationError, validate_list_size
