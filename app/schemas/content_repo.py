from pydantic import BaseModel


class ContentRepoConfig(BaseModel):
    """Where posts live and how to reach them."""

    owner: str
    repo: str
    api_url: str = "https://api.github.com"
    token: str = ""
    branch: str = "main"
    posts_dir: str = "posts"
    timeout: float = 15.0
    max_workers: int = 8

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def posts_prefix(self) -> str:
        return f"{self.posts_dir.strip('/')}/"
