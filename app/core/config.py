"""환경 변수 기반 설정. pydantic-settings 사용."""

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """앱 설정. 환경변수에서 로드. 시크릿은 SecretStr로 마스킹, 필수 시크릿은 기본값 없음(Fail-fast)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # 서버
    host: str = "127.0.0.1"
    port: int = Field(4000, ge=1, le=65535)
    sentry_dsn: SecretStr | None = None
    environment: str = "development"  # Sentry/로깅용. production, staging, development 등.
    allowed_origins: str = ""

    # DB
    database_url: str | None = None
    db_connect_retries: int = Field(5, ge=1, le=20)  # 연결 실패 시 재시도 횟수.
    db_connect_retry_interval_sec: float = Field(2.0, ge=0.5, le=60.0)  # 재시도 간격(초).

    # 앱 JWT (필수: 기본값 없음 → 부팅 시점 Fail-fast)
    jwt_secret: SecretStr
    jwt_issuer: str = "user-auth"  # JWT iss 클레임 (발급자). 검증 시 사용.
    jwt_audience: str = "user-auth-api"  # JWT aud 클레임 (대상). 검증 시 사용.
    jwt_access_expire_seconds: int = Field(3600, ge=60, le=86400)  # Access 토큰 만료(초).

    # 소셜 로그인. 미설정이면 해당 provider 호출 시 OAuthConfigError.
    google_client_id: str | None = None
    google_client_secret: SecretStr | None = None
    google_redirect_uri: str | None = None
    kakao_client_id: str | None = None
    kakao_client_secret: SecretStr | None = None  # 카카오는 선택(콘솔에서 활성화한 경우만).
    kakao_redirect_uri: str | None = None
    naver_client_id: str | None = None
    naver_client_secret: SecretStr | None = None
    naver_redirect_uri: str | None = None
    # 외부 OAuth 호출 타임아웃(초).
    http_timeout_seconds: float = Field(10.0, ge=1.0, le=60.0)

    # Redis (선택). OAuth state 저장용. 미설정 시 state 대조 생략.
    redis_url: str | None = None
    redis_socket_timeout: float = Field(5.0, ge=1.0, le=60.0)
    redis_socket_connect_timeout: float = Field(2.0, ge=0.5, le=30.0)
    redis_max_connections: int = Field(20, ge=1, le=100)
    oauth_state_ttl_seconds: int = Field(600, ge=60, le=3600)

    @model_validator(mode="after")
    def fail_fast_production(self: "Settings") -> "Settings":
        """프로덕션 환경 시 필수 변수 누락이면 부팅 거부(Fail-Fast)."""
        if (self.environment or "").strip().lower() != "production":
            return self
        missing: list[str] = []
        if not (self.database_url or "").strip():
            missing.append("DATABASE_URL")
        if not (self.jwt_secret.get_secret_value() or "").strip():
            missing.append("JWT_SECRET")
        if missing:
            raise ValueError(
                f"Production environment requires these variables to be set: {', '.join(missing)}. "
                "Set them in Secret Manager or environment before boot."
            )
        return self


settings = Settings()
