import json
import re
from pathlib import Path

import pytest
import yaml

from backend.app.config.settings import Settings
from scripts import redeploy

ROOT = Path(__file__).resolve().parents[2]
CHART = ROOT / "chart" / "hello-world"


@pytest.fixture(scope="module")
def values():
    return yaml.safe_load((CHART / "values.yaml").read_text(encoding="utf-8"))


@pytest.fixture(scope="module")
def deployment_template():
    return (CHART / "templates" / "deployment.yaml").read_text(encoding="utf-8")


@pytest.fixture(scope="module")
def dockerfile():
    return (ROOT / "Dockerfile").read_text(encoding="utf-8").splitlines()


def test_single_replica(values):
    assert values["replicaCount"] == 1


def test_nodeport_service_on_8081(values):
    assert values["service"]["type"] == "NodePort"
    assert values["service"]["port"] == 8081
    assert values["containerPort"] == 8081


def test_default_pull_policy_uses_loaded_image(values):
    assert values["image"]["pullPolicy"] == "IfNotPresent"
    assert values["image"]["repository"] == redeploy.parse_args([]).image


def test_greeting_value_matches_service_default(values):
    assert values["greeting"] == Settings(_env_file=None).greeting == "Hello, World!"


def test_probes_target_health(values):
    assert values["livenessProbe"]["httpGet"]["path"] == "/health"
    assert values["readinessProbe"]["httpGet"]["path"] == "/health"


def test_greeting_value_reaches_container_env(deployment_template):
    assert re.search(
        r"- name: GREETING\n\s+value: \{\{ \.Values\.greeting \| quote \}\}",
        deployment_template,
    )
    assert re.search(
        r"- name: PORT\n\s+value: \{\{ \.Values\.containerPort \| quote \}\}",
        deployment_template,
    )
    assert "containerPort: {{ .Values.containerPort }}" in deployment_template


def test_chart_name_matches_restart_target():
    chart = yaml.safe_load((CHART / "Chart.yaml").read_text(encoding="utf-8"))
    assert chart["name"] == redeploy.CHART_NAME


def test_dockerfile_exposes_8081(dockerfile):
    assert "EXPOSE 8081" in dockerfile
    assert any(line.strip().startswith("PORT=8081") for line in dockerfile)


def test_dockerfile_launches_server_directly(dockerfile):
    entrypoints = [line for line in dockerfile if line.startswith("ENTRYPOINT ")]
    assert len(entrypoints) == 1
    assert json.loads(entrypoints[0][len("ENTRYPOINT "):]) == ["python", "-m", "backend.devserver"]


def test_notes_smoke_hint_works_for_every_service_type():
    notes = (CHART / "templates" / "NOTES.txt").read_text(encoding="utf-8")
    branches = re.split(r"\{\{- (?:else if [^}]*|else) \}\}", notes.split("{{- end }}")[0])
    assert len(branches) == 3
    for branch in branches:
        assert "export HELLO_BASE_URL=" in branch
    assert "$NODE_IP" not in "".join(branches[1:])
    assert "--base-url $HELLO_BASE_URL" in notes
