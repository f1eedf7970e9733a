"""FastAPI application entrypoint. No business logic; only wiring.

Run with: uvicorn travel_api.main:app
"""

from dotenv import load_dotenv

load_dotenv()

from travel_api.application import create_app

app = create_app()
