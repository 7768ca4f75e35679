"""Main entry point for running the FastAPI application with auto-reload."""
import uvicorn

from committee_match.config import settings

if __name__ == "__main__":
    print(f"Starting {settings.app_name} v{settings.version}")
    print(f"Debug mode: {settings.debug}")
    print(f"Model: {settings.openai.model} (temperature {settings.openai.temperature})")
    print(f"API key: {'configured' if settings.openai_api_key else 'MISSING'}")
    print(f"Auto-reload: {'Enabled' if settings.debug else 'Disabled'}")
    print("-" * 50)

    uvicorn.run(
        "committee_match.api:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        reload_dirs=["committee_match", "ai", "config"] if settings.debug else None,
        reload_includes=["*.py"] if settings.debug else None,
        log_level=settings.logging.level.lower(),
    )
