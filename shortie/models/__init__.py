from shortie.models.entry_model import Entry


__all__ = ['Entry']
