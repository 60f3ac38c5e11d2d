from shortie.dao.memory.janitor import Janitor
from shortie.dao.memory.token_memory_dao import TokenMemoryDAO


__all__ = [
    'Janitor',
    'TokenMemoryDAO',
]
