from github import Auth, Github

# The fake accepts any token; the client just needs one to build its Authorization header.
DEFAULT_TOKEN = "fake-github-token"


def get_github_client(base_url: str, token: str = DEFAULT_TOKEN) -> Github:
    """Build a PyGithub client that talks to a fake GitHub server instead of api.github.com.

    Retries and write throttling are disabled so every call reaches the fake immediately and observes its latest state.
    The client is lazy: the fake does not serve `GET /repos/{owner}/{repo}`, so repositories are only used to build URLs.
    """

    return Github(
        auth=Auth.Token(token),
        base_url=base_url,
        lazy=True,
        retry=None,
        seconds_between_requests=None,
        seconds_between_writes=None,
    )
