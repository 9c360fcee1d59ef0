# ABOUTME: Debug logging helper gated on the DEBUG env flag
# ABOUTME: Prints component-tagged lines to stdout so Cloud Run captures them

from windfield.config import Config


def debug_log(message: str, component: str = "DEBUG") -> None:
    """Print a debug line when DEBUG=true, otherwise do nothing."""
    if Config.DEBUG:
        print(f"[{component}] {message}", flush=True)
