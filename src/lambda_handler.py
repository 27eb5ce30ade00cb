"""AWS Lambda entry point.

Mangum translates API Gateway HTTP API (v2) events into ASGI so the
token proxy runs serverless without changes.
"""

from mangum import Mangum

from src.main import app

handler = Mangum(app, lifespan="off")
