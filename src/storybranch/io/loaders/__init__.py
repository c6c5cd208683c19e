from .errors import LoaderError
from .state_loader import load_state, save_state
from .story_loader import load_stories

__all__ = ["load_stories", "load_state", "save_state", "LoaderError"]
