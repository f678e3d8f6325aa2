# Core components: config and logging
from .config import Settings, get_settings, settings
from .logging_config import setup_logging
from .clock import Clock, utc_now
