import os
from dotenv import load_dotenv

load_dotenv()

# Access token (JWT) configuration
ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET", "change-me-access-token-secret")
ACCESS_TOKEN_ALGORITHM = os.getenv("ACCESS_TOKEN_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 15))

# Machine-to-machine API key (sent in the API_KEY_HEADER request header)
SECRET_API_KEY = os.getenv("SECRET_API_KEY", "")
API_KEY_HEADER = os.getenv("API_KEY_HEADER", "x-api-key")

# Initial admin account created by the seeder (skipped when email is empty)
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")
ADMIN_NAME = os.getenv("ADMIN_NAME", "Administrator")

# Password hashing cost factor
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", 12))
