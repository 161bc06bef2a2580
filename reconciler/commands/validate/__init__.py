from .detect import DetectCommand

__all__ = ['DetectCommand']
