from .config import Settings, settings, MEGABYTE
