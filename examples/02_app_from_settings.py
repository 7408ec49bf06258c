"""
Application assembled from appsettings.json.

Demonstrates:
- Loading feature flags from a settings file with environment overrides
- ShowDebugInfo toggling the debug message on the index page
- EnableLogging adding the RequestLogging stage

Override flags without editing the file:
    APP_FEATURES__SHOW_DEBUG_INFO=false python examples/02_app_from_settings.py
"""

from pathlib import Path

from fastapi_middleware_pipeline import create_app, load_settings

settings = load_settings(Path(__file__).with_name("appsettings.json"))
app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

    # Test with:
    # curl -i http://localhost:8000/
