from bangumi.utils.get_logger import get_logger, set_level
from bangumi.utils.pydantic_tools import BaseModelWithMethods

__all__ = ["BaseModelWithMethods", "get_logger", "set_level"]
