from dataclasses import dataclass
from config.auth_settings import (
    ACCESS_TOKEN_SECRET,
    ACCESS_TOKEN_ALGORITHM,
    ACCESS_TOKEN_EXPIRE_MINUTES,
    SECRET_API_KEY,
    API_KEY_HEADER,
)


@dataclass(frozen=True)
class AccessTokenConfig:
    secret_key: str
    algorithm: str
    expire_minutes: int


@dataclass(frozen=True)
class ApiKeyConfig:
    secret_api_key: str
    header_name: str

    @property
    def enabled(self) -> bool:
        """An empty key disables API-key identity entirely."""
        return bool(self.secret_api_key)


def get_access_token_config() -> AccessTokenConfig:
    return AccessTokenConfig(
        secret_key=ACCESS_TOKEN_SECRET,
        algorithm=ACCESS_TOKEN_ALGORITHM,
        expire_minutes=ACCESS_TOKEN_EXPIRE_MINUTES,
    )


def get_api_key_config() -> ApiKeyConfig:
    return ApiKeyConfig(secret_api_key=SECRET_API_KEY, header_name=API_KEY_HEADER)
