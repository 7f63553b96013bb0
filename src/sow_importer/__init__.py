"""SoW Importer - structure Statement-of-Work spreadsheets into chapter documents."""

__version__ = "0.1.0"


def main() -> None:
    """Run the FastAPI server using uvicorn."""
    import uvicorn

    from sow_importer.config import settings

    uvicorn.run(
        "sow_importer.api:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.debug,
    )
