import json
import logging
import sys

from windfield.config import Config, WindFieldSettings
from windfield.output.geojson import build_feature_collection
from windfield.wind.resolver import WindFieldResolver

# =============================================================================
# CONFIGURATION
# =============================================================================
# Sites, offsets and calibration come from WIND_SITES etc. in .env
# (see windfield/config.py). Pass --geojson to dump the FeatureCollection.


def print_wind_report(run):
    """Print a short per-site wind report."""
    if not run.results and not run.failures:
        print("No sites configured!")
        return

    print("\n" + "=" * 50)
    for result in run.results:
        print(f"📍 {result.site.name}  ({result.site.lat:.4f}, {result.site.lon:.4f})")
        print(f"🕐 {result.time.replace('T', ' ')}")
        print(f"💨 Wind:     {result.label} from {result.direction_from:.0f}° true")
        print(f"➡️  Toward:   {result.direction_to:.0f}°  (icon rotation {result.render_rotation:.0f}°)")
        if result.wave_height is not None:
            print(f"🌊 Waves:    {result.wave_height:.1f} m")
        print(f"🔘 Samples:  {result.sample_count}")
        print("-" * 50)
    for name, error in run.failures.items():
        print(f"❌ {name}: {error}")
    print("=" * 50 + "\n")


# =============================================================================
# MAIN
# =============================================================================
if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG if Config.DEBUG else logging.WARNING)

    settings = WindFieldSettings.from_config(Config)
    print(f"Resolving wind for {len(settings.sites)} sites...", file=sys.stderr)

    run = WindFieldResolver(settings).run()

    if "--geojson" in sys.argv:
        print(json.dumps(build_feature_collection(run.results), indent=2))
    else:
        print_wind_report(run)
