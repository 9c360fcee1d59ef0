# ABOUTME: NiceGUI web entry point serving the current wind FeatureCollection
# ABOUTME: Runs the orchestrator refresh loop in the background until shutdown

import logging
import threading

from nicegui import app, background_tasks, run, ui

from windfield.config import Config, WindFieldSettings
from windfield.orchestrator import WindOrchestrator

log = logging.getLogger(__name__)

settings = WindFieldSettings.from_config(Config)
orchestrator = WindOrchestrator(settings)
stop_event = threading.Event()


async def refresh_loop():
    """Run the orchestrator's periodic loop on a worker thread until shutdown."""
    await run.io_bound(orchestrator.run_forever, stop_event)


app.on_startup(lambda: background_tasks.create(refresh_loop(), name="wind-refresh"))
app.on_shutdown(stop_event.set)


@app.get('/api/wind')
def wind_geojson():
    """Current wind FeatureCollection plus freshness metadata"""
    cached_data = orchestrator.get_cached_data()
    fetched_at = cached_data["fetched_at"]
    return {
        **cached_data["feature_collection"],
        "is_offline": cached_data["is_offline"],
        "fetched_at": fetched_at.isoformat() if fetched_at else None,
    }


if __name__ in {"__main__", "__mp_main__"}:
    import os
    logging.basicConfig(level=logging.DEBUG if Config.DEBUG else logging.INFO)
    port = int(os.environ.get('PORT', 8080))
    ui.run(
        title='Wind Field',
        host='0.0.0.0',
        port=port,
        reload=False  # Disable reload in production
    )
