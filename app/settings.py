from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from app.schemas.content_repo import ContentRepoConfig


def choose_env_file() -> str:
    return ".env.local" if Path(".env.local").exists() else ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=choose_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # tolerate unrelated env vars
    )

    # Postgres
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USERNAME: str = "postgres"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DATABASE: str = "postgres_db"
    # Full SQLAlchemy URL, wins over the POSTGRES_* parts (e.g. sqlite for local seeding)
    DATABASE_URL: str = ""

    # GitHub content repository
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_OWNER: str = "tom-sherman"
    GITHUB_REPO: str = "blog"
    GITHUB_TOKEN: str = ""
    GITHUB_BRANCH: str = "main"
    GITHUB_TIMEOUT_SECONDS: float = 15.0
    GITHUB_WEBHOOK_SECRET: str = ""
    POSTS_DIR: str = "posts"
    SYNC_MAX_WORKERS: int = 8

    # Blog
    SITE_URL: str = "http://localhost:8000"
    BLOG_TITLE: str = "Tom Sherman Blog"
    BLOG_DESCRIPTION: str = "Tom Sherman's blog"
    REDIRECT_UNLISTED: bool = True
    RENDER_CACHE_SIZE: int = 256

    # Logging
    LOG_LEVEL: str = "INFO"

    # Our own API Key
    BLOG_API_KEY: str = ""

    @property
    def postgres_url(self) -> str:
        return f"postgresql://{self.POSTGRES_USERNAME}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DATABASE}"

    @property
    def database_url(self) -> str:
        return self.DATABASE_URL or self.postgres_url

    @property
    def content_repo_config(self) -> ContentRepoConfig:
        return ContentRepoConfig(
            api_url=self.GITHUB_API_URL,
            owner=self.GITHUB_OWNER,
            repo=self.GITHUB_REPO,
            token=self.GITHUB_TOKEN,
            branch=self.GITHUB_BRANCH,
            posts_dir=self.POSTS_DIR,
            timeout=self.GITHUB_TIMEOUT_SECONDS,
            max_workers=self.SYNC_MAX_WORKERS,
        )


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()
