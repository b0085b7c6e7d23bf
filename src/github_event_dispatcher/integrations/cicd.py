"""CI/CD pipeline triggers.

Pushes are forwarded to GitHub Actions as a `repository_dispatch` event. A
workflow opts in with:

    on:
      repository_dispatch:
        types: [ci-trigger]

and reads the job fields from `github.event.client_payload`.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Protocol

import requests
from github import Auth, Github, GithubException
from pydantic import BaseModel

from github_event_dispatcher.errors import TriggerError

logger = logging.getLogger(__name__)


class CICDJob(BaseModel):
    """What a pipeline needs to build one pushed commit."""

    repository: str
    branch: str
    commit: str
    author: str


class CICDTrigger(Protocol):
    def trigger(self, job: CICDJob) -> None: ...

    def close(self) -> None: ...


class GitHubDispatchTrigger:
    """Trigger workflows via the GitHub `repository_dispatch` API (PyGithub)."""

    def __init__(
        self,
        *,
        token: str,
        base_url: str = "https://api.github.com",
        event_type: str = "ci-trigger",
        target_repository: str | None = None,
        github_api: Github | None = None,
    ) -> None:
        if not token and github_api is None:
            raise ValueError("GitHub token is required")
        if not event_type.strip():
            raise ValueError("event_type is required")

        self._event_type = event_type
        self._target_repository = (target_repository or "").strip() or None
        self._github = github_api or Github(auth=Auth.Token(token), base_url=base_url)

    def trigger(self, job: CICDJob) -> None:
        repository = self._target_repository or job.repository
        try:
            repo = self._github.get_repo(repository)
            accepted = repo.create_repository_dispatch(
                self._event_type, client_payload=job.model_dump()
            )
        except GithubException as exc:
            raise TriggerError(
                f"repository_dispatch to {repository} failed ({exc.status}): {exc.data}"
            ) from exc
        except requests.RequestException as exc:
            raise TriggerError(f"repository_dispatch to {repository} failed: {exc}") from exc

        if not accepted:
            raise TriggerError(f"repository_dispatch to {repository} was not accepted")

        logger.info(
            "CI/CD triggered",
            extra={
                "repo": repository,
                "branch": job.branch,
                "commit": job.commit,
                "event_type": self._event_type,
            },
        )

    def close(self) -> None:
        self._github.close()


class LoggingTrigger:
    """Fallback used when no GitHub token is configured.

    Only the most recent `history` jobs are kept in memory.
    """

    def __init__(self, history: int = 100) -> None:
        self.jobs: deque[CICDJob] = deque(maxlen=history)

    def trigger(self, job: CICDJob) -> None:
        self.jobs.append(job)
        logger.info(
            "CI/CD trigger (no pipeline configured)",
            extra={"repo": job.repository, "branch": job.branch, "commit": job.commit},
        )

    def close(self) -> None:
        pass
