from typing import Any, Literal, NamedTuple, Self

from pydantic import BaseModel, ConfigDict, Field, RootModel, model_validator

StatusState = Literal["error", "failure", "pending", "success"]


class IssueKey(NamedTuple):
    """Identifies an issue or pull request within a repository."""

    owner: str
    repo: str
    number: int


class CommitKey(NamedTuple):
    """Identifies a commit within a repository."""

    owner: str
    repo: str
    sha: str


class Resource(BaseModel):
    """A GitHub resource that keeps every field the client sent."""

    model_config = ConfigDict(extra="allow")

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Owner(Resource):
    login: str = Field(description="The login of the repository owner.")


class Repository(Resource):
    name: str = Field(description="The name of the repository.")
    owner: Owner = Field(description="The owner of the repository.")


class PullRequestBranch(Resource):
    repo: Repository = Field(description="The repository the branch lives in.")


class PullRequest(Resource):
    """A pull request. Only the fields that identify it are modeled."""

    number: int = Field(description="The number of the pull request.")
    base: PullRequestBranch = Field(description="The branch the pull request targets.")

    @property
    def key(self) -> IssueKey:
        return IssueKey(owner=self.base.repo.owner.login, repo=self.base.repo.name, number=self.number)

    @classmethod
    def for_repository(cls, owner: str, repo: str, number: int, **fields: Any) -> Self:  # pyright: ignore[reportAny]
        """Build a minimal pull request payload for the given repository."""

        base: dict[str, Any] = {"repo": {"name": repo, "owner": {"login": owner}}}
        return cls.model_validate({"number": number, "base": base, **fields})


class IssueComment(Resource):
    body: str = Field(description="The contents of the comment.")


class RepoStatus(Resource):
    state: StatusState = Field(description="The state of the status.")


class CombinedStatus(BaseModel):
    """All statuses posted against a single commit."""

    total_count: int = Field(description="The number of statuses.")
    statuses: list[RepoStatus] = Field(description="The statuses, oldest first.")

    @classmethod
    def from_statuses(cls, statuses: list[RepoStatus]) -> Self:
        return cls(total_count=len(statuses), statuses=statuses)

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Label(BaseModel):
    name: str = Field(description="The name of the label.")

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class LabelNames(RootModel[list[str]]):
    """Label names from an add or replace labels request.

    Accepts `["a"]`, `[{"name": "a"}]`, `{"labels": ["a"]}` and `{"labels": [{"name": "a"}]}`.
    """

    @model_validator(mode="before")
    @classmethod
    def normalize(cls, data: Any) -> Any:  # pyright: ignore[reportAny]
        if isinstance(data, dict):
            if "labels" not in data:
                msg = "Expected a labels field"
                raise ValueError(msg)
            data = data["labels"]  # pyright: ignore[reportUnknownVariableType]

        if isinstance(data, list):
            return [item["name"] if isinstance(item, dict) and "name" in item else item for item in data]  # pyright: ignore[reportUnknownVariableType]

        return data  # pyright: ignore[reportUnknownVariableType]
