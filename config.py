"""
Configuration Module

This module loads environment variables and defines global configuration settings
for the application, such as token and session secrets, lifetimes, the listen
address and the runtime environment.

Dependencies:
    - dotenv for loading environment variables
    - logging for application warnings
"""
import os
import logging
from dotenv import load_dotenv, find_dotenv

logger = logging.getLogger(__name__)

# Load environment variables from the .env file, if there is one
if not load_dotenv(find_dotenv()):
    logger.warning("No .env file found, falling back to process environment and defaults.")

# -----------------------------------
# Runtime Configuration
# -----------------------------------
APP_ENV = os.getenv("APP_ENV", "development")
IS_PRODUCTION = APP_ENV == "production"
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "5000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Simulated latency (seconds) awaited by every store operation
STORE_LATENCY_SECONDS = float(os.getenv("STORE_LATENCY_SECONDS", "0"))

# -----------------------------------
# Security Configuration
# -----------------------------------
JWT_SECRET = os.getenv("JWT_SECRET")
if not JWT_SECRET:
    JWT_SECRET = "access"
    logger.warning("!!!WARNING!!!: JWT_SECRET is not set! Using an insecure default.")

SESSION_SECRET = os.getenv("SESSION_SECRET")
if not SESSION_SECRET:
    SESSION_SECRET = "fingerprint_customer"
    logger.warning("!!!WARNING!!!: SESSION_SECRET is not set! Using an insecure default.")

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60
SESSION_MAX_AGE_SECONDS = 24 * 60 * 60
