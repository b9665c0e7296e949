import io
import tarfile
from typing import Dict, List, Optional

import httpx
import pytest
import respx
from typer.testing import CliRunner

from deployctl import util
from deployctl.client import ApiClient
from deployctl.models import AuthConfig, ScopeContext

API_URL = "https://api.test"
CREATED_AT = 1_600_000_000_000


def error_response(status: int, code: str, message: str):
    return httpx.Response(status, json={"error": {"code": code, "message": message}})


def make_tarball(files: Dict[str, bytes], top: str = "example-main") -> bytes:
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, content in files.items():
            info = tarfile.TarInfo(f"{top}/{name}")
            info.size = len(content)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(content))
    return buf.getvalue()


class FakePlatform:

    """In-memory platform API served through respx routes"""

    def __init__(self):
        self.user = {"id": "user_1", "username": "alice"}
        self.teams: List[dict] = []
        self.deployments: List[dict] = []
        self.projects: List[dict] = []
        self.project_deployments: Dict[str, List[dict]] = {}
        self.aliases: Dict[str, List[str]] = {}
        self.examples: List[dict] = []
        self.archives: Dict[str, bytes] = {}
        self.failing = set()
        self.removed_deployments: List[tuple] = []
        self.removed_projects: List[str] = []
        self.router: Optional[respx.MockRouter] = None

    ########################################
    # Fixtures data
    ########################################

    def add_deployment(self, id_: str, name: str, url: Optional[str] = None, aliases=()):
        deployment = {
            "id": id_,
            "name": name,
            "url": url or f"{name}-{id_}.example.app",
            "createdAt": CREATED_AT,
        }
        self.deployments.append(deployment)
        if aliases:
            self.aliases[id_] = list(aliases)
        return deployment

    def add_project(self, id_: str, name: str, deployments=()):
        self.projects.append({"id": id_, "name": name})
        self.project_deployments[id_] = [
            {
                "uid": dep_id,
                "name": name,
                "url": f"{name}-{dep_id}.example.app",
                "created": CREATED_AT,
            }
            for dep_id in deployments
        ]

    def add_team(self, id_: str, slug: str):
        self.teams.append({"id": id_, "slug": slug})

    @property
    def calls(self):
        return self.router.calls

    def paths(self, method: str = "GET"):
        return [c.request.url.path for c in self.calls if c.request.method == method]

    ########################################
    # Handlers
    ########################################

    def get_user(self, request):
        return httpx.Response(200, json={"user": self.user})

    def get_team(self, request, key):
        for team in self.teams:
            if key == team["id"]:
                return httpx.Response(200, json=team)
        return error_response(404, "not_found", "Team not found")

    def find_team(self, request):
        slug = request.url.params.get("slug")
        for team in self.teams:
            if slug == team["slug"]:
                return httpx.Response(200, json=team)
        return error_response(404, "not_found", "Team not found")

    def get_deployment(self, request, key):
        if key in self.failing:
            return error_response(500, "internal_server_error", "Boom")
        for deployment in self.deployments:
            if key in (deployment["id"], deployment["url"]):
                return httpx.Response(200, json=deployment)
        return error_response(404, "not_found", "Deployment not found")

    def get_project(self, request, key):
        if key in self.failing:
            return error_response(500, "internal_server_error", "Boom")
        for project in self.projects:
            if key in (project["id"], project["name"]):
                return httpx.Response(200, json=project)
        return error_response(404, "not_found", "Project not found")

    def list_deployments(self, request):
        params = request.url.params
        items = self.project_deployments.get(params.get("projectId"), [])
        start = int(params.get("until", 0))
        end = start + int(params["limit"])
        page = items[start:end]
        pagination = {"count": len(page), "next": end if end < len(items) else None}
        return httpx.Response(200, json={"deployments": page, "pagination": pagination})

    def get_aliases(self, request, key):
        aliases = [
            {"alias": alias, "uid": f"alias_{i}", "deploymentId": key}
            for i, alias in enumerate(self.aliases.get(key, []))
        ]
        return httpx.Response(200, json={"aliases": aliases})

    def delete_deployment(self, request, key):
        if key in self.failing:
            return error_response(500, "internal_server_error", "Boom")
        self.removed_deployments.append((key, request.url.params.get("hard")))
        return httpx.Response(200, json={"uid": key, "state": "DELETED"})

    def delete_project(self, request, key):
        if key in self.failing:
            return error_response(500, "internal_server_error", "Boom")
        self.removed_projects.append(key)
        return httpx.Response(204)

    def list_examples(self, request):
        return httpx.Response(200, json=self.examples)

    def download_example(self, request, key):
        if key not in self.archives:
            return error_response(404, "not_found", "Example not found")
        content = self.archives[key]
        return httpx.Response(
            200,
            content=content,
            headers={"Content-Length": str(len(content))},
        )

    def install(self, router: respx.MockRouter):
        self.router = router

        deployment = r"^/v13/deployments/(?P<key>.+)$"
        project = r"^/v9/projects/(?P<key>.+)$"

        router.get(path="/v2/user").mock(side_effect=self.get_user)
        router.get(path="/v2/teams").mock(side_effect=self.find_team)
        router.get(path__regex=r"^/v2/teams/(?P<key>[^/]+)$").mock(side_effect=self.get_team)
        router.get(path__regex=deployment).mock(side_effect=self.get_deployment)
        router.delete(path__regex=deployment, name="delete_deployment").mock(
            side_effect=self.delete_deployment
        )
        router.get(path__regex=project).mock(side_effect=self.get_project)
        router.delete(path__regex=project).mock(side_effect=self.delete_project)
        router.get(path="/v6/deployments").mock(side_effect=self.list_deployments)
        router.get(path__regex=r"^/v2/deployments/(?P<key>[^/]+)/aliases$").mock(
            side_effect=self.get_aliases
        )
        router.get(path="/v2/examples/list").mock(side_effect=self.list_examples)
        router.get(path__regex=r"^/v2/examples/download/(?P<key>[^/]+)\.tar\.gz$").mock(
            side_effect=self.download_example
        )


@pytest.fixture(autouse=True)
def app_env(tmp_path, monkeypatch):
    monkeypatch.setattr(util, "APP_DIR", str(tmp_path / "app"))
    monkeypatch.setenv("DEPLOYCTL_TOKEN", "test-token")
    monkeypatch.setenv("DEPLOYCTL_API_URL", API_URL)
    monkeypatch.delenv("DEPLOYCTL_SCOPE", raising=False)


@pytest.fixture
def platform():
    fake = FakePlatform()
    with respx.mock(assert_all_called=False) as router:
        fake.install(router)
        yield fake


@pytest.fixture
def client():
    with ApiClient(AuthConfig(url=API_URL, token="test-token")) as api_client:
        yield api_client


@pytest.fixture
def scope():
    return ScopeContext(context_name="alice", user_id="user_1")


@pytest.fixture
def runner():
    return CliRunner()
