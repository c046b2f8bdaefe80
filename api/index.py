"""
AWS Lambda entry point for the Emotriage API
"""
import os

# Set environment variables for serverless
os.environ.setdefault("ENVIRONMENT", "production")

from mangum import Mangum

from emotriage.main import app

# Lambda handler for the ASGI app; lifespan builds the S3 and inference clients
handler = Mangum(app, lifespan="auto")
