import os
from dotenv import load_dotenv

load_dotenv()

# API Configuration
APP_NAME = os.getenv("APP_NAME", "Shop")
APP_VERSION = "1.0.0"
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", 8000))
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./shop.db")

# Comma separated list of allowed origins
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:8000").split(",")
    if origin.strip()
]

# Pagination
DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", 10))
MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", 100))

# Placeholder values for SKUs generated from variants
SKU_DEFAULT_PRICE = 0
SKU_DEFAULT_STOCK = 100
SKU_DEFAULT_IMAGE = ""

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "")
LOG_FORMAT = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
